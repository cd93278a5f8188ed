"""
Error translation for the API routes
"""

import logging

from fastapi.responses import JSONResponse

from fleet.errors import (
    BookingNotFound,
    FleetError,
    InvalidInput,
    InvalidStatusTransition,
    VehicleNotFound,
    VehicleUnavailable,
)

logger = logging.getLogger(__name__)


def validation_response(fields: dict, message: str = "Invalid input") -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "error": InvalidInput.title,
            "message": message,
            "details": [f"{field}: {msg}" for field, msg in fields.items()],
            "fields": fields,
        },
    )


def handle_error(error: Exception) -> JSONResponse:
    """Handle errors and return appropriate JSON response"""
    if isinstance(error, InvalidInput):
        return validation_response(error.fields, str(error))

    if isinstance(error, (VehicleNotFound, BookingNotFound)):
        return JSONResponse(
            status_code=404, content={"error": error.title, "message": str(error)}
        )

    if isinstance(error, VehicleUnavailable):
        return JSONResponse(
            status_code=409,
            content={
                "error": error.title,
                "message": str(error),
                "conflict": {
                    "vehicleId": error.vehicle_id,
                    "startTime": error.start_time.isoformat(),
                    "endTime": error.end_time.isoformat(),
                    "conflictingWindows": [
                        {"startTime": s.isoformat(), "endTime": e.isoformat()}
                        for s, e in error.conflicting_windows
                    ],
                },
            },
        )

    if isinstance(error, InvalidStatusTransition):
        return JSONResponse(
            status_code=409,
            content={
                "error": error.title,
                "message": str(error),
                "details": [f"status: cannot move from {error.current} to {error.requested}"],
            },
        )

    logger.exception("Unhandled error: %s", error)
    error_message = str(error) if isinstance(error, FleetError) else "Internal Server Error"
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "details": error_message},
    )
