# app/repositories/service_repo.py
from typing import Any

from supabase import Client

from app.repositories._query import all_rows, first_row

TABLE = "services"


class ServiceRepository:
    """
    Data access layer for the `services` catalog table.

    - Pure gateway calls (CRUD + queries).
    - No fallback catalog, no business logic.
    """

    def list_services(self, client: Client, only_active: bool = True) -> list[dict[str, Any]]:
        stmt = client.table(TABLE).select("*")
        if only_active:
            stmt = stmt.eq("active", True)
        return all_rows(stmt.order("created_at", desc=True).execute())

    def get_by_id(self, client: Client, service_id: str) -> dict[str, Any] | None:
        res = client.table(TABLE).select("*").eq("id", service_id).maybe_single().execute()
        return first_row(res)

    def create(self, client: Client, values: dict[str, Any]) -> dict[str, Any] | None:
        return first_row(client.table(TABLE).insert(values).execute())

    def update(self, client: Client, service_id: str, values: dict[str, Any]) -> dict[str, Any] | None:
        res = client.table(TABLE).update(values).eq("id", service_id).execute()
        return first_row(res)

    def delete(self, client: Client, service_id: str) -> None:
        client.table(TABLE).delete().eq("id", service_id).execute()
