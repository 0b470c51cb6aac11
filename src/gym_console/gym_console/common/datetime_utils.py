from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_timestamp(value) -> Optional[datetime]:
    """Parse a Postgres timestamptz string (or pass a datetime through)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip().replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def parse_clock(value: str) -> time:
    """Parse HH:MM or HH:MM:SS wall-clock strings."""
    parts = value.strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time string: {value!r}")
    hours = int(parts[0])
    minutes = int(parts[1])
    seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
    return time(hour=hours, minute=minutes, second=seconds)


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch it.
    """
    return date.today()


def format_time(value: Optional[str]) -> str:
    if not value:
        return "-"
    text = str(value)
    return text[:5] if len(text) >= 5 else text


def format_day_label(value: date) -> str:
    """Short chart label, e.g. 'Oct 13'."""
    return f"{value.strftime('%b')} {value.day}"


def minutes_between(check_in: str, check_out: str) -> int:
    start = parse_clock(check_in)
    end = parse_clock(check_out)
    start_s = start.hour * 3600 + start.minute * 60 + start.second
    end_s = end.hour * 3600 + end.minute * 60 + end.second
    return (end_s - start_s) // 60


def compute_duration(check_in: Optional[str], check_out: Optional[str]) -> Optional[str]:
    """Display duration derived from check-in/check-out, e.g. '1h 30m'.

    Returns None when either side is missing. The range must be positive.
    """
    if not check_in or not check_out:
        return None
    minutes = minutes_between(check_in, check_out)
    if minutes <= 0:
        raise ValueError("Invalid time range")
    return f"{minutes // 60}h {minutes % 60}m"
