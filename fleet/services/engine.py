"""
Fleet engine: the operations offered to the HTTP layer
"""

import logging
from datetime import datetime
from functools import lru_cache
from typing import Callable, List, Optional
from uuid import uuid4

from pydantic import ValidationError

from config import settings
from fleet.errors import InvalidInput
from fleet.models.booking import (
    BookingStatus,
    DashboardStats,
    Reservation,
    SearchResponse,
)
from fleet.models.vehicle import Vehicle, VehicleCreate
from fleet.services import dashboard
from fleet.services.duration import DEFAULT_MIN_DURATION_HOURS
from fleet.services.ledger import ReservationLedger
from fleet.services.search import search
from fleet.services.store import RecordStore
from fleet.utils.timeaddr import utcnow

logger = logging.getLogger(__name__)


def field_errors(error) -> dict:
    """Map a pydantic ValidationError or a RequestValidationError onto {field: message}"""
    fields = {}
    for e in error.errors():
        loc = [str(part) for part in e["loc"] if part not in ("body", "query")]
        fields.setdefault(".".join(loc) or "request", e["msg"])
    return fields


class FleetEngine:
    def __init__(
        self,
        store: Optional[RecordStore] = None,
        clock: Callable[[], datetime] = utcnow,
        timezone_id: str = "UTC",
        min_duration_hours: float = DEFAULT_MIN_DURATION_HOURS,
        recent_limit: int = 5,
    ):
        self.store = store if store is not None else RecordStore()
        self.clock = clock
        self.timezone_id = timezone_id
        self.min_duration_hours = min_duration_hours
        self.recent_limit = recent_limit
        self.ledger = ReservationLedger(
            self.store,
            clock=clock,
            timezone_id=timezone_id,
            min_duration_hours=min_duration_hours,
        )

    # ---- roster ----------------------------------------------------------

    def add_vehicle(self, name: str, capacity_kg: int, tyres: int) -> Vehicle:
        """
        Register a vehicle

        Raises:
            InvalidInput: With one message per invalid field
        """
        try:
            data = VehicleCreate(name=name, capacity_kg=capacity_kg, tyres=tyres)
        except ValidationError as e:
            raise InvalidInput(field_errors(e))

        vehicle = Vehicle(
            id=uuid4().hex,
            name=data.name,
            capacity_kg=data.capacity_kg,
            tyres=data.tyres,
            created_at=self.clock(),
        )
        self.store.insert_vehicle(vehicle)
        logger.info(
            "Registered vehicle %s (%s, %dkg, %d tyres)",
            vehicle.id,
            vehicle.name,
            vehicle.capacity_kg,
            vehicle.tyres,
        )
        return vehicle

    def list_vehicles(self) -> List[Vehicle]:
        return self.store.list_vehicles()

    def get_vehicle(self, vehicle_id: str) -> Vehicle:
        return self.store.get_vehicle(vehicle_id)

    # ---- search & booking ------------------------------------------------

    def search_vehicles(
        self, capacity_required, from_pincode: str, to_pincode: str, start_time
    ) -> SearchResponse:
        return search(
            self.store.list_vehicles(),
            self.store.list_reservations(),
            capacity_required,
            from_pincode,
            to_pincode,
            start_time,
            now=self.clock(),
            timezone_id=self.timezone_id,
            min_duration_hours=self.min_duration_hours,
        )

    def create_booking(
        self,
        vehicle_id: str,
        customer_id: str,
        from_pincode: str,
        to_pincode: str,
        start_time,
    ) -> Reservation:
        return self.ledger.reserve(
            vehicle_id, customer_id, from_pincode, to_pincode, start_time
        )

    def list_bookings(
        self,
        vehicle_id: Optional[str] = None,
        status: Optional[BookingStatus] = None,
        customer_id: Optional[str] = None,
    ) -> List[Reservation]:
        """Bookings matching every given filter, newest first"""
        bookings = self.ledger.snapshot(
            vehicle_id=vehicle_id, status=status, customer_id=customer_id
        )
        return sorted(bookings, key=lambda r: (r.created_at, r.sequence), reverse=True)

    def get_booking(self, booking_id: str) -> Reservation:
        return self.ledger.get(booking_id)

    def update_booking_status(
        self, booking_id: str, status: BookingStatus
    ) -> Reservation:
        return self.ledger.update_status(booking_id, status)

    # ---- dashboard -------------------------------------------------------

    def get_dashboard_stats(self) -> DashboardStats:
        return dashboard.aggregate(
            self.store.list_vehicles(),
            self.store.list_reservations(),
            self.clock(),
            self.recent_limit,
        )


@lru_cache
def get_engine() -> FleetEngine:
    """Process-wide engine built from settings"""
    return FleetEngine(
        store=RecordStore(settings.storage.data_file),
        timezone_id=settings.booking.timezone,
        min_duration_hours=settings.booking.min_duration_hours,
        recent_limit=settings.booking.recent_limit,
    )
