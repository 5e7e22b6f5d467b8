"""Time utilities for timestamp parsing and UTC formatting."""

from datetime import date, datetime, time, timezone
from typing import Any, Optional


def utc_now_z() -> str:
    """
    Get current UTC time as ISO 8601 string with Z suffix.

    Example:
        >>> utc_now_z()
        '2025-12-23T00:27:07.804867Z'
    """
    return to_utc_z(datetime.now(timezone.utc))


def to_utc_z(dt: datetime) -> str:
    """
    Convert datetime to ISO 8601 UTC string with Z suffix.

    Args:
        dt: Datetime object (must be timezone-aware)

    Returns:
        ISO 8601 UTC timestamp ending with 'Z' (e.g., '2025-12-23T00:27:07.804867Z')

    Raises:
        ValueError: If datetime is naive (not timezone-aware)
    """
    if dt.tzinfo is None:
        raise ValueError(
            f"Naive datetime not allowed. Got {dt}. "
            "Use datetime.now(timezone.utc) or dt.replace(tzinfo=timezone.utc)"
        )
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a record or filter value into an aware UTC datetime.

    Accepted inputs:
    - datetime (naive values are taken as UTC)
    - date (midnight UTC)
    - ISO 8601 string, with or without a trailing 'Z'
    - int/float epoch seconds

    Returns:
        Aware datetime in UTC, or None when the value is missing or unparseable.
        Never raises.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return parse_timestamp(parsed)
    return None


def calendar_day(value: Any) -> Optional[date]:
    """Return the UTC calendar day of a timestamp-like value, or None."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return parsed.date()
