"""
Booking API routes

Writes are plain def endpoints: FastAPI runs them in its thread pool, so a
booking waiting on one vehicle's lock never holds up the event loop.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from fleet.models.booking import (
    BookingRequest,
    BookingResponse,
    BookingStatus,
    Reservation,
    StatusUpdate,
)
from fleet.routers.errors import handle_error
from fleet.services.engine import FleetEngine, get_engine

router = APIRouter()


@router.post("/bookings", response_model=BookingResponse, status_code=201)
def create_booking(request: BookingRequest, engine: FleetEngine = Depends(get_engine)):
    try:
        booking = engine.create_booking(
            request.vehicle_id,
            request.customer_id,
            request.from_pincode,
            request.to_pincode,
            request.start_time,
        )
        return BookingResponse(message="Booking created successfully", booking=booking)

    except Exception as e:
        return handle_error(e)


@router.get("/bookings", response_model=List[Reservation])
async def list_bookings(
    vehicle_id: Optional[str] = Query(None, alias="vehicleId"),
    status: Optional[BookingStatus] = None,
    customer_id: Optional[str] = Query(None, alias="customerId"),
    engine: FleetEngine = Depends(get_engine),
):
    try:
        return engine.list_bookings(
            vehicle_id=vehicle_id, status=status, customer_id=customer_id
        )

    except Exception as e:
        return handle_error(e)


@router.get("/bookings/{booking_id}", response_model=Reservation)
async def get_booking(booking_id: str, engine: FleetEngine = Depends(get_engine)):
    try:
        return engine.get_booking(booking_id)

    except Exception as e:
        return handle_error(e)


@router.patch("/bookings/{booking_id}/status", response_model=BookingResponse)
def update_booking_status(
    booking_id: str, request: StatusUpdate, engine: FleetEngine = Depends(get_engine)
):
    try:
        booking = engine.update_booking_status(booking_id, request.status)
        return BookingResponse(message=f"Booking {booking.status.value}", booking=booking)

    except Exception as e:
        return handle_error(e)
