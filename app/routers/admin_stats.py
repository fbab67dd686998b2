# app/routers/admin_stats.py
from fastapi import APIRouter, Depends
from supabase import Client

from app.core.auth import require_admin
from app.dependencies import get_gateway, get_stats_service
from app.routers._results import unwrap
from app.schemas.booking import BookingRead
from app.schemas.stats import DashboardStats
from app.services.stats_service import StatsService

router = APIRouter(
    prefix="/admin/stats",
    tags=["Admin Stats"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=DashboardStats)
def get_admin_dashboard_stats(
    client: Client | None = Depends(get_gateway),
    service: StatsService = Depends(get_stats_service),
):
    """
    Aggregated statistics for the admin dashboard.

    Never fails on backend problems; zeros are returned instead.
    Only accessible to users with role='admin'.
    """
    return unwrap(service.get_dashboard_stats(client))


@router.get("/recent-bookings", response_model=list[BookingRead])
def get_recent_bookings(
    limit: int = 10,
    client: Client | None = Depends(get_gateway),
    service: StatsService = Depends(get_stats_service),
):
    """Latest bookings with service name and customer profile."""
    return unwrap(service.get_recent_bookings(client, limit=limit))
