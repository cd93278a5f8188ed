"""
Dashboard API routes
"""

from fastapi import APIRouter, Depends

from fleet.models.booking import DashboardStats
from fleet.routers.errors import handle_error
from fleet.services.engine import FleetEngine, get_engine

router = APIRouter()


@router.get("/dashboard/stats", response_model=DashboardStats)
async def get_dashboard_stats(engine: FleetEngine = Depends(get_engine)):
    try:
        return engine.get_dashboard_stats()

    except Exception as e:
        return handle_error(e)
