from fleet.errors import InvalidRouteInput
from fleet.utils.timeaddr import is_valid_pincode

DEFAULT_MIN_DURATION_HOURS = 1.0


def validate_route(from_pincode: str, to_pincode: str) -> dict:
    """Per-field messages for malformed pincodes, empty when both are valid"""
    errors = {}
    for field, value in (("fromPincode", from_pincode), ("toPincode", to_pincode)):
        if value is None or value == "":
            errors[field] = "Pincode is required"
        elif not is_valid_pincode(value):
            errors[field] = "Pincode must be exactly 6 digits"
    return errors


def estimate_duration_hours(
    from_pincode: str,
    to_pincode: str,
    min_duration_hours: float = DEFAULT_MIN_DURATION_HOURS,
) -> float:
    """
    Estimate the ride duration between two pincodes

    The estimate is |to - from| mod 24 hours. A zero-hour estimate (same
    pincode, or a difference that is a multiple of 24) is raised to
    min_duration_hours so that every window has start < end.

    Raises:
        InvalidRouteInput: If either pincode is not six digits
    """
    errors = validate_route(from_pincode, to_pincode)
    if errors:
        raise InvalidRouteInput(errors)
    if min_duration_hours <= 0:
        raise ValueError("min_duration_hours must be positive")

    hours = abs(int(to_pincode) - int(from_pincode)) % 24
    if hours == 0:
        return float(min_duration_hours)
    return float(hours)
