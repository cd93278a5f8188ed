from datetime import datetime
from typing import List

from fleet.errors import InvalidSearchCriteria
from fleet.models.booking import (
    AvailableVehicle,
    Reservation,
    SearchCriteria,
    SearchResponse,
)
from fleet.models.vehicle import Vehicle
from fleet.services.criteria import check_capacity, check_trip, trip_window
from fleet.services.duration import DEFAULT_MIN_DURATION_HOURS
from fleet.services.intervals import is_free


def search(
    vehicles: List[Vehicle],
    reservations: List[Reservation],
    capacity_required,
    from_pincode: str,
    to_pincode: str,
    start_time,
    now: datetime,
    timezone_id: str = "UTC",
    min_duration_hours: float = DEFAULT_MIN_DURATION_HOURS,
) -> SearchResponse:
    """
    Find vehicles able to carry capacity_required that are free for the trip

    1. validate the criteria
    2. compute the trip window from the estimated ride duration
    3. keep vehicles with enough capacity
    4. keep vehicles without an active reservation overlapping the window

    Vehicles keep their roster order. No match gives an empty list.

    Raises:
        InvalidSearchCriteria: If any field is invalid (all fields reported)
    """
    errors, start = check_trip(from_pincode, to_pincode, start_time, now, timezone_id)
    capacity_error = check_capacity(capacity_required)
    if capacity_error:
        errors["capacityRequired"] = capacity_error
    if errors:
        raise InvalidSearchCriteria(errors)

    window = trip_window(from_pincode, to_pincode, start, min_duration_hours)

    candidates = [v for v in vehicles if v.capacity_kg >= capacity_required]
    candidates = [
        v
        for v in candidates
        if is_free(v.id, window.start_time, window.end_time, reservations)
    ]

    return SearchResponse(
        available_vehicles=[
            AvailableVehicle(
                **v.model_dump(),
                estimated_ride_duration_hours=window.duration_hours,
                from_pincode=from_pincode,
                to_pincode=to_pincode,
                start_time=window.start_time,
                end_time=window.end_time,
            )
            for v in candidates
        ],
        search_criteria=SearchCriteria(
            capacity_required=capacity_required,
            from_pincode=from_pincode,
            to_pincode=to_pincode,
            start_time=window.start_time,
            end_time=window.end_time,
            estimated_ride_duration_hours=window.duration_hours,
        ),
    )
