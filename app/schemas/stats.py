# app/schemas/stats.py
from pydantic import ConfigDict
from sqlmodel import SQLModel


class DashboardStats(SQLModel):
    """
    Headline numbers for the admin dashboard.

    total_revenue sums total_price over approved bookings only;
    total_revenue_display is the same amount as shown on the page ("RM 1,200").
    """
    model_config = ConfigDict(extra="forbid")

    total_bookings: int = 0
    pending_bookings: int = 0
    approved_bookings: int = 0
    total_revenue: float = 0.0
    total_revenue_display: str = ""
