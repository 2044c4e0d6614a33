# guidance/utils/dates.py

import re
from datetime import date, datetime, time, timedelta, timezone as dt_timezone
from typing import List, Optional

from django.utils import dateparse, timezone

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def normalize_date(value) -> str:
    """
    Normalize a date-ish value from the API to ``YYYY-MM-DD`` (the HTML date
    input format). Returns "" for missing or unparseable values.
    """
    if value is None or value == "":
        return ""
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = value.astimezone(dt_timezone.utc)
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    text = str(value).strip()
    if not text:
        return ""
    if ISO_DATE_RE.match(text):
        try:
            parsed = dateparse.parse_date(text)
        except ValueError:
            return ""
        return parsed.isoformat() if parsed else ""

    try:
        parsed_dt = dateparse.parse_datetime(text)
    except ValueError:
        return ""
    if parsed_dt is None:
        return ""
    if timezone.is_aware(parsed_dt):
        parsed_dt = parsed_dt.astimezone(dt_timezone.utc)
    return parsed_dt.date().isoformat()


def parse_iso_date(value) -> Optional[date]:
    normalized = normalize_date(value)
    return date.fromisoformat(normalized) if normalized else None


def generate_date_range(start, end) -> List[str]:
    """Every calendar date between start and end inclusive, ascending."""
    start_date = parse_iso_date(start)
    end_date = parse_iso_date(end)
    if not start_date or not end_date:
        return []

    dates = []
    current = start_date
    while current <= end_date:
        dates.append(current.isoformat())
        current += timedelta(days=1)
    return dates


def is_weekend(value) -> bool:
    parsed = parse_iso_date(value)
    return bool(parsed and parsed.weekday() >= 5)


def weekdays_only(dates) -> List[str]:
    return [d for d in dates if not is_weekend(d)]


def sunday_first_column(value: date) -> int:
    """Column index in a Sun..Sat week grid."""
    return (value.weekday() + 1) % 7


def format_date(value, default: str = "N/A") -> str:
    """en-US short form, e.g. ``Mar 2, 2025``."""
    parsed = parse_iso_date(value)
    if not parsed:
        return default
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def format_time(value) -> str:
    """12-hour clock with a zero-padded hour, e.g. ``08:00 AM``."""
    if not value:
        return ""
    if isinstance(value, time):
        return value.strftime("%I:%M %p")

    text = str(value)
    if ":" in text:
        hours, _, rest = text.partition(":")
        minutes = rest.split(":", 1)[0]
        try:
            hour, minute = int(hours), int(minutes)
        except ValueError:
            return "Invalid Time"
        if 0 <= hour <= 23 and 0 <= minute <= 59:
            return time(hour, minute).strftime("%I:%M %p")
    return "Invalid Time"


def month_label(value: date) -> str:
    return f"{value:%B} {value.year}"


def month_key(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def current_academic_year(today: Optional[date] = None) -> str:
    today = today or timezone.localdate()
    return f"{today.year}-{today.year + 1}"
