from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple

from fleet.errors import InvalidSearchCriteria
from fleet.services.duration import estimate_duration_hours, validate_route
from fleet.utils.timeaddr import parse_instant


@dataclass(frozen=True)
class TripWindow:
    start_time: datetime
    end_time: datetime
    duration_hours: float


def check_trip(
    from_pincode, to_pincode, start_time, now: datetime, timezone_id: str
) -> Tuple[Dict[str, str], Optional[datetime]]:
    """
    Validate a route and start time

    Returns:
        (errors, start) where errors maps field names to messages and start is
        the parsed UTC start time, or None when it could not be parsed
    """
    errors = validate_route(from_pincode, to_pincode)

    start = None
    if start_time is None or start_time == "":
        errors["startTime"] = "Start time is required"
    else:
        try:
            start = parse_instant(start_time, timezone_id)
        except (ValueError, OverflowError):
            errors["startTime"] = "Start time must be a valid date and time"
        else:
            if start <= now:
                errors["startTime"] = "Start time must be in the future"

    return errors, start


def check_capacity(capacity_required) -> Optional[str]:
    if capacity_required is None or capacity_required == "":
        return "Capacity requirement is required"
    if isinstance(capacity_required, bool) or not isinstance(
        capacity_required, (int, float)
    ):
        return "Capacity must be a number"
    if capacity_required <= 0:
        return "Capacity must be greater than 0"
    return None


def trip_window(
    from_pincode: str, to_pincode: str, start: datetime, min_duration_hours: float
) -> TripWindow:
    """
    Window of the trip starting at start

    Raises:
        InvalidSearchCriteria: If the trip would end past the last representable date
    """
    hours = estimate_duration_hours(from_pincode, to_pincode, min_duration_hours)
    try:
        end = start + timedelta(hours=hours)
    except OverflowError:
        raise InvalidSearchCriteria({"startTime": "Start time is too far in the future"})
    return TripWindow(start_time=start, end_time=end, duration_hours=hours)
