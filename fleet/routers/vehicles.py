"""
Vehicle API routes
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from fleet.models.booking import SearchResponse
from fleet.models.vehicle import Vehicle, VehicleCreate, VehicleResponse
from fleet.routers.errors import handle_error
from fleet.services.engine import FleetEngine, get_engine

router = APIRouter()


@router.post("/vehicles", response_model=VehicleResponse, status_code=201)
def add_vehicle(request: VehicleCreate, engine: FleetEngine = Depends(get_engine)):
    try:
        vehicle = engine.add_vehicle(request.name, request.capacity_kg, request.tyres)
        return VehicleResponse(message="Vehicle added successfully", vehicle=vehicle)

    except Exception as e:
        return handle_error(e)


@router.get("/vehicles", response_model=List[Vehicle])
async def list_vehicles(engine: FleetEngine = Depends(get_engine)):
    try:
        return engine.list_vehicles()

    except Exception as e:
        return handle_error(e)


@router.get("/vehicles/available", response_model=SearchResponse)
async def find_available_vehicles(
    capacity_required: Optional[int] = Query(None, alias="capacityRequired"),
    from_pincode: Optional[str] = Query(None, alias="fromPincode"),
    to_pincode: Optional[str] = Query(None, alias="toPincode"),
    start_time: Optional[str] = Query(None, alias="startTime"),
    engine: FleetEngine = Depends(get_engine),
):
    try:
        return engine.search_vehicles(
            capacity_required, from_pincode, to_pincode, start_time
        )

    except Exception as e:
        return handle_error(e)


@router.get("/vehicles/{vehicle_id}", response_model=Vehicle)
async def get_vehicle(vehicle_id: str, engine: FleetEngine = Depends(get_engine)):
    try:
        return engine.get_vehicle(vehicle_id)

    except Exception as e:
        return handle_error(e)
