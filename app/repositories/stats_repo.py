# app/repositories/stats_repo.py
from supabase import Client

from app.repositories._query import all_rows

TABLE = "bookings"


class StatsRepository:
    """
    Read-only aggregate queries for the admin dashboard.

    Each number is its own request (count-only selects), there is no
    grouped query on the store side.
    """

    def count_bookings(self, client: Client, status: str | None = None) -> int:
        stmt = client.table(TABLE).select("*", count="exact", head=True)
        if status is not None:
            stmt = stmt.eq("status", status)
        res = stmt.execute()
        return int(res.count or 0)

    def approved_prices(self, client: Client) -> list[float]:
        """total_price of every approved booking; null prices count as 0."""
        res = client.table(TABLE).select("total_price").eq("status", "approved").execute()
        return [float(row.get("total_price") or 0) for row in all_rows(res)]
