import logging
from datetime import datetime
from typing import Callable, List, Optional
from uuid import uuid4

from fleet.errors import InvalidInput, InvalidSearchCriteria, VehicleUnavailable
from fleet.models.booking import BookingStatus, Reservation
from fleet.services.criteria import check_trip, trip_window
from fleet.services.duration import DEFAULT_MIN_DURATION_HOURS
from fleet.services.store import RecordStore
from fleet.utils.timeaddr import utcnow

logger = logging.getLogger(__name__)


class ReservationLedger:
    """
    Authoritative reservation set

    reserve() recomputes the trip window itself; a window computed earlier by a
    search is never trusted. The free-check and the insert are a single atomic
    unit per vehicle (see RecordStore.insert_reservation_if_absent_overlap).
    """

    def __init__(
        self,
        store: RecordStore,
        clock: Callable[[], datetime] = utcnow,
        timezone_id: str = "UTC",
        min_duration_hours: float = DEFAULT_MIN_DURATION_HOURS,
    ):
        self.store = store
        self.clock = clock
        self.timezone_id = timezone_id
        self.min_duration_hours = min_duration_hours

    def reserve(
        self,
        vehicle_id: str,
        customer_id: str,
        from_pincode: str,
        to_pincode: str,
        start_time,
    ) -> Reservation:
        """
        Reserve vehicle_id for the trip from_pincode -> to_pincode at start_time

        Raises:
            InvalidSearchCriteria: If any field is invalid (all fields reported)
            VehicleNotFound: If vehicle_id is not on the roster
            VehicleUnavailable: If the vehicle is busy during the trip window
            StorageFailure: If the reservation could not be persisted
        """
        now = self.clock()
        errors, start = check_trip(
            from_pincode, to_pincode, start_time, now, self.timezone_id
        )
        if not isinstance(vehicle_id, str) or not vehicle_id.strip():
            errors["vehicleId"] = "Vehicle ID is required"
        if not isinstance(customer_id, str) or not customer_id.strip():
            errors["customerId"] = "Customer ID is required"
        if errors:
            raise InvalidSearchCriteria(errors)

        vehicle = self.store.get_vehicle(vehicle_id)
        window = trip_window(from_pincode, to_pincode, start, self.min_duration_hours)

        reservation = Reservation(
            id=uuid4().hex,
            vehicle_id=vehicle.id,
            customer_id=customer_id.strip(),
            from_pincode=from_pincode,
            to_pincode=to_pincode,
            start_time=window.start_time,
            end_time=window.end_time,
            estimated_ride_duration_hours=window.duration_hours,
            status=BookingStatus.CONFIRMED,
            created_at=now,
        )

        try:
            reservation = self.store.insert_reservation_if_absent_overlap(reservation)
        except VehicleUnavailable as e:
            logger.warning(
                "Booking conflict on vehicle %s for [%s, %s): %d overlapping",
                vehicle.id,
                window.start_time.isoformat(),
                window.end_time.isoformat(),
                len(e.conflicting_windows),
            )
            raise

        logger.info(
            "Booked vehicle %s for %s as %s [%s, %s)",
            vehicle.id,
            reservation.customer_id,
            reservation.id,
            reservation.start_time.isoformat(),
            reservation.end_time.isoformat(),
        )
        return reservation

    def update_status(self, reservation_id: str, status) -> Reservation:
        try:
            status = BookingStatus(status)
        except ValueError:
            allowed = ", ".join(s.value for s in BookingStatus)
            raise InvalidInput({"status": f"Status must be one of: {allowed}"})

        reservation = self.store.update_reservation_status(reservation_id, status)
        logger.info("Booking %s is now %s", reservation_id, status.value)
        return reservation

    def get(self, reservation_id: str) -> Reservation:
        return self.store.get_reservation(reservation_id)

    def snapshot(
        self,
        vehicle_id: Optional[str] = None,
        status: Optional[BookingStatus] = None,
        customer_id: Optional[str] = None,
    ) -> List[Reservation]:
        return self.store.list_reservations(
            vehicle_id=vehicle_id, status=status, customer_id=customer_id
        )
