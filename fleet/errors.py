"""
Fleet service errors
"""

from datetime import datetime
from typing import Dict, List, Optional, Tuple


class FleetError(Exception):
    """Base class of every error raised by the fleet services"""

    title = "Internal Server Error"


class InvalidInput(FleetError):
    """Input rejected by validation, with one message per offending field"""

    title = "Validation failed"

    def __init__(self, fields: Dict[str, str], message: Optional[str] = None):
        self.fields = dict(fields)
        super().__init__(message or "Invalid input: " + ", ".join(self.details))

    @property
    def details(self) -> List[str]:
        return [f"{field}: {msg}" for field, msg in self.fields.items()]


class InvalidRouteInput(InvalidInput):
    """Malformed origin or destination pincode"""


class InvalidSearchCriteria(InvalidInput):
    """Search or booking criteria failed validation"""


class VehicleNotFound(FleetError):
    title = "Vehicle not found"

    def __init__(self, vehicle_id: str):
        self.vehicle_id = vehicle_id
        super().__init__(f'Vehicle "{vehicle_id}" does not exist.')


class BookingNotFound(FleetError):
    title = "Booking not found"

    def __init__(self, booking_id: str):
        self.booking_id = booking_id
        super().__init__(f'Booking "{booking_id}" does not exist.')


class VehicleUnavailable(FleetError):
    """The vehicle already holds a booking overlapping the requested window"""

    title = "Vehicle unavailable"

    def __init__(
        self,
        vehicle_id: str,
        start_time: datetime,
        end_time: datetime,
        conflicting_windows: List[Tuple[datetime, datetime]],
    ):
        self.vehicle_id = vehicle_id
        self.start_time = start_time
        self.end_time = end_time
        self.conflicting_windows = list(conflicting_windows)
        super().__init__(
            f'Vehicle "{vehicle_id}" is already booked between '
            f"{start_time.isoformat()} and {end_time.isoformat()}."
        )


class InvalidStatusTransition(FleetError):
    title = "Invalid status transition"

    def __init__(self, booking_id: str, current: str, requested: str):
        self.booking_id = booking_id
        self.current = current
        self.requested = requested
        super().__init__(
            f'Booking "{booking_id}" cannot move from "{current}" to "{requested}".'
        )


class StorageFailure(FleetError):
    """The durable store could not read or write a record"""
