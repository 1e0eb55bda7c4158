"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

# Indian financial years (and most school sessions) begin in April
FISCAL_YEAR_START_MONTH = 4

PERIODS = (
    "this-month",
    "last-month",
    "this-quarter",
    "last-quarter",
    "this-year",
    "last-year",
    "this-fiscal-year",
    "last-fiscal-year",
)


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "15 Jan 2024", etc.
    - Relative dates: "today", "yesterday", "tomorrow", "this month",
      "last month", "this year", "last year"

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this year": today.replace(month=1, day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    # Try parsing as absolute date; ISO-style input is year first, others day first
    try:
        dt = date_parser.parse(date_str, dayfirst=not date_str[:4].isdigit())
        return dt.date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def fiscal_year_start(day: date, start_month: int = FISCAL_YEAR_START_MONTH) -> date:
    """First day of the fiscal year containing day."""
    year = day.year if day.month >= start_month else day.year - 1
    return date(year, start_month, 1)


def get_date_range(period: str, today: date | None = None) -> tuple[date, date]:
    """Get start and end dates for a named period.

    "this-" periods end today; "last-" periods are complete.

    Args:
        period: One of PERIODS
        today: Reference date (defaults to the current date)

    Returns:
        Tuple of (start_date, end_date) for the specified period

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "this-month":
        return (today.replace(day=1), today)

    elif period == "last-month":
        end_date = today.replace(day=1) - timedelta(days=1)
        return (end_date.replace(day=1), end_date)

    elif period == "this-quarter":
        start_month = 3 * ((today.month - 1) // 3) + 1
        return (today.replace(month=start_month, day=1), today)

    elif period == "last-quarter":
        this_quarter_start = today.replace(month=3 * ((today.month - 1) // 3) + 1, day=1)
        start_date = this_quarter_start - relativedelta(months=3)
        return (start_date, this_quarter_start - timedelta(days=1))

    elif period == "this-year":
        return (today.replace(month=1, day=1), today)

    elif period == "last-year":
        start_date = today.replace(month=1, day=1) - relativedelta(years=1)
        return (start_date, today.replace(month=1, day=1) - timedelta(days=1))

    elif period == "this-fiscal-year":
        return (fiscal_year_start(today), today)

    elif period == "last-fiscal-year":
        this_start = fiscal_year_start(today)
        return (this_start - relativedelta(years=1), this_start - timedelta(days=1))

    else:
        raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
