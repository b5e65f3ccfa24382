# asset_insights/utils/date_utils.py
"""
Date helpers shared by the timeline and presentation code.

Timeline samples carry epoch-second timestamps while holdings carry calendar
acquisition dates. Both are interpreted in UTC so that "acquired on
2024-06-01" means "from 2024-06-01T00:00:00Z onward".

Usage:
    from asset_insights.utils.date_utils import date_to_timestamp

    if point.timestamp < date_to_timestamp(holding.acquisition_date):
        ...
"""

from datetime import date, datetime, timezone

# strftime format for chart labels
DISPLAY_DATE_FORMAT = "%Y-%m-%d"


def date_to_timestamp(d: date) -> int:
    """
    Epoch seconds of midnight UTC at the start of a calendar date.

    Example:
        >>> date_to_timestamp(date(2024, 1, 1))
        1704067200
    """
    return int(datetime(d.year, d.month, d.day, tzinfo=timezone.utc).timestamp())


def timestamp_to_datetime(timestamp: int | float) -> datetime:
    """Timezone-aware UTC datetime for an epoch-seconds timestamp."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def format_display_date(timestamp: int | float, fmt: str = DISPLAY_DATE_FORMAT) -> str:
    """Chart label for a timeline timestamp (UTC calendar date by default)."""
    return timestamp_to_datetime(timestamp).strftime(fmt)
