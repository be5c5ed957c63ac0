from datetime import date, datetime, timedelta
import calendar
from utils.constants import DATE_FORMAT, MONTH_FORMAT
from utils.errors import InvalidDateError


def today() -> date:
    return date.today()


def today_str() -> str:
    return date.today().strftime(DATE_FORMAT)


def current_month_str() -> str:
    return date.today().strftime(MONTH_FORMAT)


def parse_date(date_str: str) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str.strip(), fmt).date()
        except ValueError:
            continue
    return None


def require_date(value, field: str = "date") -> date:
    """Coerce a date, datetime or YYYY-MM-DD string to a date.

    Raises InvalidDateError instead of substituting a default, so a bad record
    never lands silently in the wrong month.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        d = parse_date(value)
        if d is not None:
            return d
    raise InvalidDateError(value, field)


def month_key(d: date) -> str:
    """Canonical YYYY-MM bucket for a date; the day and time are ignored."""
    return f"{d.year:04d}-{d.month:02d}"


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def format_month(d: date) -> str:
    return month_key(d)


def parse_month(month_str: str) -> date | None:
    """Return the first day of the given YYYY-MM month string."""
    if not month_str:
        return None
    try:
        return datetime.strptime(month_str, MONTH_FORMAT).date()
    except ValueError:
        return None


def month_bounds(month_str: str) -> tuple[date, date]:
    """Return (first_day, last_day) for a YYYY-MM month."""
    d = parse_month(month_str)
    if d is None:
        raise InvalidDateError(month_str, "month")
    last_day = calendar.monthrange(d.year, d.month)[1]
    return d, d.replace(day=last_day)


def prev_month(month_str: str) -> str:
    first, _ = month_bounds(month_str)
    return format_month(add_months(first, -1))


def next_month(month_str: str) -> str:
    first, _ = month_bounds(month_str)
    return format_month(add_months(first, 1))


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    max_day = calendar.monthrange(year, month)[1]
    return min(day, max_day)


def add_months(d: date, n: int) -> date:
    """Add n months to date d, clamping day to month end."""
    month = d.month - 1 + n
    year = d.year + month // 12
    month = month % 12 + 1
    day = clamp_day_to_month(year, month, d.day)
    return d.replace(year=year, month=month, day=day)


def add_years(d: date, n: int) -> date:
    """Add n years; Feb 29 becomes Feb 28 outside leap years."""
    return add_months(d, 12 * n)


def start_of_week(d: date) -> date:
    """Monday of the week containing d."""
    return d - timedelta(days=d.weekday())


def friendly_month(month_str: str) -> str:
    """Convert YYYY-MM to e.g. 'February 2026'."""
    d = parse_month(month_str)
    if d is None:
        return month_str
    return d.strftime("%B %Y")


def format_display_date(date_str: str) -> str:
    """Convert a YYYY-MM-DD storage string to e.g. 'Jun 9, 2025'."""
    d = parse_date(date_str)
    if d is None:
        return date_str
    return f"{d.strftime('%b')} {d.day}, {d.year}"
