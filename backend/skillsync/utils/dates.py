# skillsync/utils/dates.py

from datetime import datetime, timezone


def to_naive_utc(value: datetime) -> datetime:
    """Timestamps are stored as naive UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def format_session_time(value: datetime) -> str:
    """e.g. 'Monday, March 3, 2025 at 2:30 PM UTC'"""
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return (
        f"{value.strftime('%A, %B')} {value.day}, {value.year} "
        f"at {hour}:{value.minute:02d} {suffix} UTC"
    )


def format_short_time(value: datetime) -> str:
    """e.g. 'Mon, Mar 3, 2:30 PM'"""
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{value.strftime('%a, %b')} {value.day}, {hour}:{value.minute:02d} {suffix}"
