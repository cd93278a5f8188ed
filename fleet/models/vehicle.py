"""
Vehicle models
"""

from datetime import datetime
from typing import Annotated

from pydantic import Field, StringConstraints

from fleet.models.base import CamelModel

VehicleName = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)
]


class VehicleCreate(CamelModel):
    """VehicleCreate model representing the json request to register a vehicle"""

    name: VehicleName
    capacity_kg: int = Field(ge=1, le=50000)
    tyres: int = Field(ge=2, le=18)


class Vehicle(CamelModel):
    """Vehicle model representing a registered fleet vehicle"""

    id: str
    name: str
    capacity_kg: int
    tyres: int
    created_at: datetime

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        return isinstance(other, Vehicle) and self.id == other.id


class VehicleResponse(CamelModel):
    message: str
    vehicle: Vehicle
