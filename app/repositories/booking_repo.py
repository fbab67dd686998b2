# app/repositories/booking_repo.py
import uuid
from typing import Any

from supabase import Client

from app.repositories._query import all_rows, first_row

TABLE = "bookings"

# Embedded service columns (PostgREST resource embedding via service_id FK)
WITH_SERVICE_DETAIL = "*, services(id, name, description, price)"
WITH_SERVICE_NAME = "*, services(id, name)"


class BookingRepository:
    """
    Data access layer for the `bookings` table.

    NOTE:
      - Profiles cannot be embedded here (they sit behind the auth
        boundary); the service merges them with a second query.
      - Listings are always newest first by created_at.
    """

    def create(self, client: Client, values: dict[str, Any]) -> dict[str, Any] | None:
        return first_row(client.table(TABLE).insert(values).execute())

    def list_for_user(self, client: Client, user_id: uuid.UUID | str) -> list[dict[str, Any]]:
        res = (
            client.table(TABLE)
            .select(WITH_SERVICE_DETAIL)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return all_rows(res)

    def get_by_id(self, client: Client, booking_id: str) -> dict[str, Any] | None:
        res = (
            client.table(TABLE)
            .select(WITH_SERVICE_DETAIL)
            .eq("id", booking_id)
            .maybe_single()
            .execute()
        )
        return first_row(res)

    def list_all(
        self,
        client: Client,
        status: str | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        stmt = client.table(TABLE).select(WITH_SERVICE_NAME)
        if status is not None:
            stmt = stmt.eq("status", status)
        stmt = stmt.order("created_at", desc=True)
        if limit is not None:
            stmt = stmt.limit(limit)
        return all_rows(stmt.execute())

    def update(
        self,
        client: Client,
        booking_id: str,
        values: dict[str, Any],
    ) -> dict[str, Any] | None:
        res = client.table(TABLE).update(values).eq("id", booking_id).execute()
        return first_row(res)
