# app/services/periods.py
#
# Date Range Helpers
# Parse startDate / endDate query parameters and compute the default
# reporting periods (current year to date, current month, last N months).
# All ranges are half-open: [start, end_exclusive).

from datetime import datetime, timedelta, timezone
from typing import NamedTuple

from app.errors import ValidationError


class Period(NamedTuple):
    start: datetime
    end: datetime  # exclusive

    def as_dict(self) -> dict:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


def parse_date_param(value: str | None, name: str) -> tuple[datetime | None, bool]:
    """
    Parse 'YYYY-MM-DD' or an ISO-8601 datetime.

    Returns (value, date_only). Empty input gives (None, False).
    Raises ValidationError on anything else.
    """
    if not value:
        return None, False
    s = value.strip()
    if not s:
        return None, False
    try:
        if len(s) == 10:
            return datetime.strptime(s, "%Y-%m-%d"), True
        parsed = datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"Invalid {name}. Use YYYY-MM-DD or ISO 8601")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed, False


def parse_range(start_str: str | None, end_str: str | None) -> tuple[datetime | None, datetime | None]:
    """
    Optional filter range from query strings. A date-only end includes that
    whole day (the returned end is exclusive).
    """
    start, _ = parse_date_param(start_str, "startDate")
    end, end_date_only = parse_date_param(end_str, "endDate")
    if end is not None and end_date_only:
        end = end + timedelta(days=1)
    return start, end


def resolve_period(start_str: str | None, end_str: str | None, now: datetime) -> Period:
    """
    Reporting period: defaults to Jan 1 of the current year up to now.
    """
    start, end = parse_range(start_str, end_str)
    if start is None:
        start = datetime(now.year, 1, 1)
    if end is None:
        end = now
    return Period(start, end)


def month_start(dt: datetime) -> datetime:
    return datetime(dt.year, dt.month, 1)


def shift_months(dt: datetime, months: int) -> datetime:
    """First day of the month `months` away from dt's month (negative = back)."""
    index = dt.year * 12 + (dt.month - 1) + months
    return datetime(index // 12, index % 12 + 1, 1)


def current_month(now: datetime) -> Period:
    return Period(month_start(now), shift_months(now, 1))
