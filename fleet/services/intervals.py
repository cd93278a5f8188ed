"""
Interval overlap and vehicle availability

Every window is half-open: [start, end).
"""

from datetime import datetime, timedelta
from typing import Iterable, List

from fleet.models.booking import BookingStatus, Reservation

# smallest step of a datetime, turns an instant into a one-tick window
_TICK = timedelta(microseconds=1)


def overlaps(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """True if [a_start, a_end) and [b_start, b_end) share at least one instant"""
    return a_start < b_end and b_start < a_end


def contains(start: datetime, end: datetime, instant: datetime) -> bool:
    """True if start <= instant < end"""
    return overlaps(start, end, instant, instant + _TICK)


def conflicts(
    vehicle_id: str,
    start: datetime,
    end: datetime,
    reservations: Iterable[Reservation],
) -> List[Reservation]:
    """Active reservations of vehicle_id overlapping [start, end)"""
    return [
        r
        for r in reservations
        if r.vehicle_id == vehicle_id
        and r.is_active
        and overlaps(r.start_time, r.end_time, start, end)
    ]


def is_free(
    vehicle_id: str,
    start: datetime,
    end: datetime,
    reservations: Iterable[Reservation],
) -> bool:
    """
    True if no confirmed or in-progress reservation of vehicle_id overlaps
    [start, end). Completed and cancelled reservations never block.
    """
    return not conflicts(vehicle_id, start, end, reservations)


def is_busy_at(reservation: Reservation, now: datetime) -> bool:
    """
    True if reservation keeps its vehicle busy at instant now

    An in-progress reservation is busy whatever its window says; a confirmed
    one only while now falls inside [start_time, end_time).
    """
    if reservation.status == BookingStatus.IN_PROGRESS:
        return True
    if reservation.status == BookingStatus.CONFIRMED:
        return contains(reservation.start_time, reservation.end_time, now)
    return False
