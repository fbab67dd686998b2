# app/repositories/profile_repo.py
import uuid
from typing import Any, Iterable

from supabase import Client

from app.repositories._query import all_rows, first_row

TABLE = "profiles"
SUMMARY_COLUMNS = "id, full_name, email, phone"
LIST_COLUMNS = "id, full_name, email"


class ProfileRepository:
    """
    Data access layer for the `profiles` table.

    - Pure gateway calls, errors propagate as raised by the client.
    - No session cache, no business rules.
    """

    def get_by_id(self, client: Client, user_id: uuid.UUID | str) -> dict[str, Any] | None:
        """Return the profile row, or None if it does not exist."""
        res = client.table(TABLE).select("*").eq("id", str(user_id)).maybe_single().execute()
        return first_row(res)

    def get_summary(self, client: Client, user_id: uuid.UUID | str) -> dict[str, Any] | None:
        res = (
            client.table(TABLE)
            .select(SUMMARY_COLUMNS)
            .eq("id", str(user_id))
            .maybe_single()
            .execute()
        )
        return first_row(res)

    def list_by_ids(self, client: Client, user_ids: Iterable[str]) -> list[dict[str, Any]]:
        """One batch query for every id in `user_ids`."""
        res = client.table(TABLE).select(LIST_COLUMNS).in_("id", list(user_ids)).execute()
        return all_rows(res)

    def insert(self, client: Client, values: dict[str, Any]) -> dict[str, Any] | None:
        return first_row(client.table(TABLE).insert(values).execute())

    def upsert(self, client: Client, values: dict[str, Any]) -> dict[str, Any] | None:
        """Insert or replace keyed by id."""
        return first_row(client.table(TABLE).upsert(values, on_conflict="id").execute())

    def update(
        self,
        client: Client,
        user_id: uuid.UUID | str,
        values: dict[str, Any],
    ) -> dict[str, Any] | None:
        res = client.table(TABLE).update(values).eq("id", str(user_id)).execute()
        return first_row(res)
