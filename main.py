"""
FastAPI Fleet Booking Application
"""

import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from fleet.routers import bookings, dashboard, vehicles
from fleet.routers.errors import validation_response
from fleet.services.engine import field_errors
from fleet.utils.timeaddr import utcnow

logging.basicConfig(
    level=settings.logging.level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create FastAPI app
app = FastAPI(
    title="Fleet Booking API",
    description="Vehicle registration, availability search and booking",
    version="1.0.0",
)

if settings.cors.enabled:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.acceptable_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Include routers
app.include_router(vehicles.router, prefix="/api")
app.include_router(bookings.router, prefix="/api")
app.include_router(dashboard.router, prefix="/api")


@app.exception_handler(RequestValidationError)
async def request_validation_error(request: Request, exc: RequestValidationError):
    return validation_response(field_errors(exc), "Invalid request data")


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "ok", "timestamp": utcnow().isoformat()}


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=5000, reload=True)
