from datetime import date, datetime, timedelta
from typing import Optional, Tuple

from dateutil.relativedelta import relativedelta

MONTH_ABBR = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def parse_day(d: str) -> Optional[date]:
    """
    Parse a YYYY-MM-DD string as a local calendar day.
    Returns None for anything unparseable.
    """
    try:
        return date.fromisoformat(d)
    except (TypeError, ValueError):
        return None


def to_millis(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def from_millis(ms: int) -> datetime:
    """Epoch millis -> naive local datetime."""
    return datetime.fromtimestamp(ms / 1000)


def now_millis() -> int:
    return to_millis(datetime.now())


def current_week_start(today: date = None) -> date:
    today = today or date.today()
    return today - timedelta(days=today.weekday())


def last_week_range(today: date = None) -> Tuple[date, date]:
    """
    Previous Monday..Sunday, never the week in progress.
    On a Monday this is the seven days that just ended.
    """
    monday = current_week_start(today) - timedelta(days=7)
    return monday, monday + timedelta(days=6)


def format_date_range(start: date, end: date) -> str:
    """
    Example:
      2024-06-03, 2024-06-09 → "Jun 3 - Jun 9"
    """
    return (
        f"{MONTH_ABBR[start.month - 1]} {start.day} - "
        f"{MONTH_ABBR[end.month - 1]} {end.day}"
    )


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    start = date(year, month, 1)
    end = start + relativedelta(months=1) - timedelta(days=1)
    return start, end
