"""
Time and pincode utilities
"""

import re
from datetime import datetime
from typing import Optional, Union

import pytz
from dateutil import parser

PINCODE_PATTERN = re.compile(r"^\d{6}$")


def is_valid_pincode(pincode: Optional[str]) -> bool:
    """True if pincode is a string of exactly six digits"""
    return isinstance(pincode, str) and PINCODE_PATTERN.match(pincode) is not None


def utcnow() -> datetime:
    """Current instant as an aware UTC datetime"""
    return datetime.now(pytz.utc)


def localize(value: datetime, timezone_id: str) -> datetime:
    """
    Attach timezone_id to a naive datetime

    Aware datetimes are returned unchanged.
    """
    if value.tzinfo is not None and value.utcoffset() is not None:
        return value
    return pytz.timezone(timezone_id).localize(value)


def to_utc(value: datetime, timezone_id: str = "UTC") -> datetime:
    """Convert value to UTC, treating naive values as local to timezone_id"""
    return localize(value, timezone_id).astimezone(pytz.utc)


def parse_instant(value: Union[str, datetime], timezone_id: str) -> datetime:
    """
    Parse an instant into an aware UTC datetime

    Args:
        value: ISO-8601 string (e.g. "2026-10-18T10:30:00Z") or datetime
        timezone_id: Timezone identifier applied when value carries no offset

    Returns:
        datetime object in UTC

    Raises:
        ValueError: If value cannot be parsed
    """
    if isinstance(value, datetime):
        return to_utc(value, timezone_id)

    if not isinstance(value, str) or not value.strip():
        raise ValueError(f'Invalid instant: "{value}".')

    try:
        parsed = parser.isoparse(value.strip())
    except ValueError:
        try:
            parsed = parser.parse(value.strip())
        except (ValueError, OverflowError) as e:
            raise ValueError(f'Invalid instant: "{value}": {str(e)}')

    return to_utc(parsed, timezone_id)


def format_duration(hours: float) -> str:
    """Render a duration in hours as "2h", "45m" or "1h 30m"."""
    whole_hours = int(hours)
    minutes = int(round((hours - whole_hours) * 60))
    if minutes == 60:
        whole_hours += 1
        minutes = 0

    if whole_hours == 0:
        return f"{minutes}m"
    if minutes == 0:
        return f"{whole_hours}h"
    return f"{whole_hours}h {minutes}m"
