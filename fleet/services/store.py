"""
Record store for the fleet roster and its reservations

Writes go to an append-only JSON-lines journal first and are applied in
memory only once the journal append succeeded. Readers never lock: the
reservations of each vehicle live in a tuple, and writers swap in a rebuilt
dict holding the new tuple.
"""

import itertools
import json
import logging
import os
from threading import Lock
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError

from fleet.errors import (
    BookingNotFound,
    InvalidStatusTransition,
    StorageFailure,
    VehicleNotFound,
    VehicleUnavailable,
)
from fleet.models.booking import ALLOWED_TRANSITIONS, BookingStatus, Reservation
from fleet.models.vehicle import Vehicle
from fleet.services.intervals import conflicts

logger = logging.getLogger(__name__)


class RecordStore:
    def __init__(self, data_file: Optional[str] = None):
        self.data_file = data_file

        self._vehicles: Dict[str, Vehicle] = {}
        self._reservations: Dict[str, Tuple[Reservation, ...]] = {}
        # reservation id -> vehicle id
        self._owners: Dict[str, str] = {}

        self._roster_lock = Lock()
        # held only while swapping in a rebuilt reservations dict
        self._swap_lock = Lock()
        self._journal_lock = Lock()
        self._locks_guard = Lock()
        self._vehicle_locks: Dict[str, Lock] = {}
        self._sequence = itertools.count(1)

        if data_file:
            self._replay()

    # ---- roster ----------------------------------------------------------

    def list_vehicles(self) -> List[Vehicle]:
        return list(self._vehicles.values())

    def get_vehicle(self, vehicle_id: str) -> Vehicle:
        vehicle = self._vehicles.get(vehicle_id)
        if vehicle is None:
            raise VehicleNotFound(vehicle_id)
        return vehicle

    def insert_vehicle(self, vehicle: Vehicle) -> Vehicle:
        with self._roster_lock:
            if vehicle.id in self._vehicles:
                raise StorageFailure(f'Duplicate vehicle id "{vehicle.id}".')
            self._append({"type": "vehicle", "record": _dump(vehicle)})
            self._apply_vehicle(vehicle)
        return vehicle

    # ---- reservations ----------------------------------------------------

    def list_reservations(
        self,
        vehicle_id: Optional[str] = None,
        status: Optional[BookingStatus] = None,
        customer_id: Optional[str] = None,
    ) -> List[Reservation]:
        if vehicle_id is not None:
            result = list(self._reservations.get(vehicle_id, ()))
        else:
            result = [r for rs in list(self._reservations.values()) for r in rs]

        if status is not None:
            result = [r for r in result if r.status == status]
        if customer_id is not None:
            result = [r for r in result if r.customer_id == customer_id]
        return result

    def get_reservation(self, reservation_id: str) -> Reservation:
        vehicle_id = self._owners.get(reservation_id)
        if vehicle_id is not None:
            for r in self._reservations.get(vehicle_id, ()):
                if r.id == reservation_id:
                    return r
        raise BookingNotFound(reservation_id)

    def insert_reservation_if_absent_overlap(
        self, reservation: Reservation
    ) -> Reservation:
        """
        Insert reservation unless an active reservation of the same vehicle
        overlaps its window

        The overlap check and the insert run under the vehicle's lock, so of two
        concurrent overlapping inserts for one vehicle exactly one succeeds.

        Raises:
            VehicleNotFound: If the vehicle is not on the roster
            VehicleUnavailable: If the window overlaps an active reservation
            StorageFailure: If the journal append fails; nothing is stored
        """
        vehicle_id = reservation.vehicle_id
        with self._lock_for(vehicle_id):
            existing = self._reservations.get(vehicle_id)
            if existing is None:
                raise VehicleNotFound(vehicle_id)

            clashing = conflicts(
                vehicle_id, reservation.start_time, reservation.end_time, existing
            )
            if clashing:
                raise VehicleUnavailable(
                    vehicle_id,
                    reservation.start_time,
                    reservation.end_time,
                    [(r.start_time, r.end_time) for r in clashing],
                )

            reservation = reservation.model_copy(
                update={"sequence": next(self._sequence)}
            )
            self._append({"type": "reservation", "record": _dump(reservation)})
            self._apply_reservation(reservation)

        return reservation

    def update_reservation_status(
        self, reservation_id: str, status: BookingStatus
    ) -> Reservation:
        """
        Move a reservation along its lifecycle

        Raises:
            BookingNotFound: If no reservation has that id
            InvalidStatusTransition: If the lifecycle forbids the move
        """
        vehicle_id = self._owners.get(reservation_id)
        if vehicle_id is None:
            raise BookingNotFound(reservation_id)

        with self._lock_for(vehicle_id):
            current = self.get_reservation(reservation_id)
            if status not in ALLOWED_TRANSITIONS[current.status]:
                raise InvalidStatusTransition(
                    reservation_id, current.status.value, status.value
                )
            self._append(
                {"type": "status", "id": reservation_id, "status": status.value}
            )
            return self._apply_status(reservation_id, status)

    # ---- internals -------------------------------------------------------

    def _lock_for(self, vehicle_id: str) -> Lock:
        lock = self._vehicle_locks.get(vehicle_id)
        if lock is None:
            with self._locks_guard:
                lock = self._vehicle_locks.setdefault(vehicle_id, Lock())
        return lock

    def _apply_vehicle(self, vehicle: Vehicle):
        self._vehicles = {**self._vehicles, vehicle.id: vehicle}
        with self._swap_lock:
            self._reservations = {**self._reservations, vehicle.id: ()}
        self._lock_for(vehicle.id)

    def _apply_reservation(self, reservation: Reservation):
        vehicle_id = reservation.vehicle_id
        with self._swap_lock:
            records = self._reservations[vehicle_id] + (reservation,)
            self._reservations = {**self._reservations, vehicle_id: records}
        self._owners[reservation.id] = vehicle_id

    def _apply_status(self, reservation_id: str, status: BookingStatus) -> Reservation:
        vehicle_id = self._owners[reservation_id]
        updated = None
        with self._swap_lock:
            records = []
            for r in self._reservations[vehicle_id]:
                if r.id == reservation_id:
                    r = updated = r.model_copy(update={"status": status})
                records.append(r)
            self._reservations = {**self._reservations, vehicle_id: tuple(records)}
        return updated

    def _append(self, event: dict):
        if not self.data_file:
            return
        line = json.dumps(event)
        with self._journal_lock:
            try:
                with open(self.data_file, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
                    f.flush()
                    os.fsync(f.fileno())
            except OSError as e:
                raise StorageFailure(
                    f'Failed to write journal "{self.data_file}": {str(e)}'
                ) from e

    def _replay(self):
        """(Re)build memory from the journal, creating its directory if needed"""
        try:
            directory = os.path.dirname(self.data_file)
            if directory:
                os.makedirs(directory, exist_ok=True)
            if not os.path.exists(self.data_file):
                return
            with open(self.data_file, "r", encoding="utf-8") as f:
                lines = [line for line in f if line.strip()]
        except OSError as e:
            raise StorageFailure(
                f'Failed to read journal "{self.data_file}": {str(e)}'
            ) from e

        last_sequence = 0
        try:
            for line in lines:
                event = json.loads(line)
                kind = event["type"]
                if kind == "vehicle":
                    self._apply_vehicle(Vehicle.model_validate(event["record"]))
                elif kind == "reservation":
                    reservation = Reservation.model_validate(event["record"])
                    self._apply_reservation(reservation)
                    last_sequence = max(last_sequence, reservation.sequence)
                elif kind == "status":
                    self._apply_status(event["id"], BookingStatus(event["status"]))
                else:
                    raise ValueError(f'Unknown journal event "{kind}"')
        except (KeyError, ValueError, ValidationError) as e:
            raise StorageFailure(
                f'Corrupt journal "{self.data_file}": {str(e)}'
            ) from e

        self._sequence = itertools.count(last_sequence + 1)
        logger.info(
            "Loaded %d vehicles and %d reservations from %s",
            len(self._vehicles),
            len(self._owners),
            self.data_file,
        )


def _dump(model) -> dict:
    return model.model_dump(mode="json", by_alias=True, exclude={"duration_formatted"})
