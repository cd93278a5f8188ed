"""
Booking models
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import computed_field, model_validator

from fleet.models.base import CamelModel
from fleet.models.vehicle import Vehicle
from fleet.utils.timeaddr import format_duration


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# statuses that hold the vehicle
ACTIVE_STATUSES = frozenset({BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS})

ALLOWED_TRANSITIONS = {
    BookingStatus.CONFIRMED: {BookingStatus.IN_PROGRESS, BookingStatus.CANCELLED},
    BookingStatus.IN_PROGRESS: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
}


class Reservation(CamelModel):
    """Reservation model representing a vehicle committed to a customer over [start_time, end_time)"""

    id: str
    vehicle_id: str
    customer_id: str

    from_pincode: str
    to_pincode: str

    start_time: datetime
    end_time: datetime
    estimated_ride_duration_hours: float

    status: BookingStatus = BookingStatus.CONFIRMED
    created_at: datetime
    # creation order, breaks ties on created_at
    sequence: int = 0

    @model_validator(mode="after")
    def check_window(self):
        if not self.start_time < self.end_time:
            raise ValueError("startTime must be before endTime")
        return self

    @computed_field
    @property
    def duration_formatted(self) -> str:
        return format_duration(self.estimated_ride_duration_hours)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES


class BookingRequest(CamelModel):
    """BookingRequest model representing the json request to reserve a vehicle"""

    vehicle_id: str
    customer_id: str
    from_pincode: str
    to_pincode: str
    start_time: Union[datetime, str]


class StatusUpdate(CamelModel):
    status: BookingStatus


class BookingResponse(CamelModel):
    message: str
    booking: Reservation


class SearchCriteria(CamelModel):
    """SearchCriteria model echoing the validated query and its computed window"""

    capacity_required: Union[int, float]
    from_pincode: str
    to_pincode: str
    start_time: datetime
    end_time: datetime
    estimated_ride_duration_hours: float


class AvailableVehicle(Vehicle):
    """AvailableVehicle model representing a search candidate with its trip window"""

    estimated_ride_duration_hours: float
    from_pincode: str
    to_pincode: str
    start_time: datetime
    end_time: datetime

    @computed_field
    @property
    def duration_formatted(self) -> str:
        return format_duration(self.estimated_ride_duration_hours)


class SearchResponse(CamelModel):
    """SearchResponse model representing the json response of a vehicle search"""

    available_vehicles: List[AvailableVehicle]
    search_criteria: SearchCriteria


class DashboardStats(CamelModel):
    """DashboardStats model representing fleet-wide counters at one instant"""

    total_vehicles: int
    available_vehicles: int
    active_bookings: int
    completed_bookings: int
    recent_bookings: List[Reservation] = []
    as_of: Optional[datetime] = None
