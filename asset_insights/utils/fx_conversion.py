# asset_insights/utils/fx_conversion.py
"""
Currency conversion over a rate table.

Rate table convention:
   Every entry is expressed against one anchor currency:
   "1 anchor = rate × currency". The anchor's own rate is 1.
   Example (anchor USD): {"USD": 1, "TWD": 32, "CNY": 7.2}

   Cross rate A → B = rate(B) / rate(A)
   Example: 5 USD → TWD = 5 × (32 / 1) = 160 TWD

Missing rates:
   A currency absent from the table (or with a non-positive rate) is
   treated as if its rate were 1. Conversion never fails; callers that need
   to surface the degradation use missing_currencies().

Every component that converts money goes through convert() so cross rates
are derived in exactly one place.
"""

from decimal import Decimal
from typing import Iterable, Mapping

ONE = Decimal("1")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """
    Coerce a numeric input to Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1"), not its binary
    expansion.
    """
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def get_rate(rate_table: Mapping[str, Decimal], currency: str) -> Decimal:
    """
    Look up a currency's anchor rate, falling back to 1.

    Args:
        rate_table: Currency code -> rate against the anchor
        currency: Currency code to look up

    Returns:
        The table rate, or 1 if missing or not positive
    """
    rate = rate_table.get(currency)
    if rate is None:
        return ONE
    rate = to_decimal(rate)
    if rate <= 0:
        return ONE
    return rate


def cross_rate(
    from_currency: str,
    to_currency: str,
    rate_table: Mapping[str, Decimal],
) -> Decimal:
    """
    Rate that converts one unit of from_currency into to_currency.

    Same-currency pairs are exactly 1 regardless of the table.
    """
    if from_currency == to_currency:
        return ONE
    return get_rate(rate_table, to_currency) / get_rate(rate_table, from_currency)


def convert(
    amount: Decimal | int | float,
    from_currency: str,
    to_currency: str,
    rate_table: Mapping[str, Decimal],
) -> Decimal:
    """
    Convert an amount between two currencies.

    Formula: amount × rate(to_currency) / rate(from_currency)

    Example:
        >>> convert(Decimal("5"), "USD", "TWD", {"USD": Decimal("1"), "TWD": Decimal("32")})
        Decimal('160')

    Args:
        amount: Amount denominated in from_currency
        from_currency: Source currency code
        to_currency: Target currency code
        rate_table: Currency code -> rate against the anchor

    Returns:
        Amount denominated in to_currency
    """
    return to_decimal(amount) * cross_rate(from_currency, to_currency, rate_table)


def missing_currencies(
    rate_table: Mapping[str, Decimal],
    currencies: Iterable[str],
) -> list[str]:
    """
    List the currencies that convert() would silently price at rate 1.

    Args:
        rate_table: Currency code -> rate against the anchor
        currencies: Currency codes about to be used

    Returns:
        Sorted, de-duplicated codes that are absent or have a non-positive rate
    """
    missing = set()
    for currency in currencies:
        rate = rate_table.get(currency)
        if rate is None or to_decimal(rate) <= 0:
            missing.add(currency)
    return sorted(missing)
