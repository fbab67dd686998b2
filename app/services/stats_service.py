# app/services/stats_service.py
import logging

from supabase import Client

from app.core.errors import GATEWAY_ERRORS, ServiceError, ServiceResult
from app.core.formatting import format_currency
from app.repositories.stats_repo import StatsRepository
from app.schemas.booking import BookingRead
from app.schemas.stats import DashboardStats
from app.services.booking_service import BookingService

logger = logging.getLogger(__name__)

# A non-numeric total_price surfaces as ValueError/TypeError while summing.
STATS_ERRORS = GATEWAY_ERRORS + (ValueError, TypeError)


def _stats(total: int = 0, pending: int = 0, approved: int = 0, revenue: float = 0.0) -> DashboardStats:
    return DashboardStats(
        total_bookings=total,
        pending_bookings=pending,
        approved_bookings=approved,
        total_revenue=float(revenue),
        total_revenue_display=format_currency(revenue),
    )


class StatsService:
    """
    Orchestrates aggregated admin dashboard statistics.

    The dashboard must never hard-fail: any problem yields all-zero stats
    flagged through `degraded_by`.
    """

    def __init__(self, repo: StatsRepository, booking_service: BookingService):
        self.repo = repo
        self.booking_service = booking_service

    def get_dashboard_stats(self, client: Client | None) -> ServiceResult[DashboardStats]:
        """
        Four independent queries:
          - total booking count
          - pending count
          - approved count
          - total_price of approved bookings, summed here
        """
        if client is None:
            return ServiceResult.fallback(_stats())

        try:
            total = self.repo.count_bookings(client)
            pending = self.repo.count_bookings(client, status="pending")
            approved = self.repo.count_bookings(client, status="approved")
            revenue = sum(self.repo.approved_prices(client))
        except STATS_ERRORS as exc:
            logger.error("Error getting dashboard stats: %s", exc)
            return ServiceResult.fallback(_stats(), ServiceError.from_exception(exc).kind)

        return ServiceResult.success(_stats(total, pending, approved, revenue))

    def get_recent_bookings(self, client: Client | None, limit: int = 10) -> ServiceResult[list[BookingRead]]:
        """Latest `limit` bookings with services and owner profiles."""
        return self.booking_service.get_recent_bookings(client, limit=limit)
