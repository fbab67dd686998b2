# app/services/catalog_service.py
import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError
from supabase import Client

from app.core.errors import (
    GATEWAY_ERRORS,
    ErrorKind,
    ServiceError,
    ServiceResult,
    get_safe_error_message,
)
from app.repositories.service_repo import ServiceRepository
from app.schemas.service import ServiceCreate, ServiceRead, ServiceUpdate

logger = logging.getLogger(__name__)

# Shown when no backend is configured so the public pages stay navigable.
PLACEHOLDER_SERVICES: tuple[dict[str, Any], ...] = (
    {
        "id": "1",
        "name": "Two Days Pilot",
        "description": "Experience flying an airplane in a real aircraft",
        "price": 500,
        "duration": "2 hours",
        "image_url": None,
        "active": True,
    },
    {
        "id": "2",
        "name": "Flight Simulator",
        "description": "Learn to fly in our state-of-the-art flight simulator",
        "price": 300,
        "duration": "1.5 hours",
        "image_url": None,
        "active": True,
    },
    {
        "id": "3",
        "name": "Skydive Malaysia",
        "description": "Fulfill your bucket list with an amazing skydiving experience",
        "price": 800,
        "duration": "Half day",
        "image_url": None,
        "active": True,
    },
)

NOT_FOUND_MESSAGE = "Service not found."
INVALID_SERVICE_MESSAGE = "Please check the service details and try again."


def _to_read(data: dict[str, Any] | list[dict[str, Any]]) -> ServiceResult:
    """Validate one row or a list of rows; a malformed row is an UNKNOWN failure."""
    try:
        if isinstance(data, list):
            return ServiceResult.success([ServiceRead.model_validate(r) for r in data])
        return ServiceResult.success(ServiceRead.model_validate(data))
    except ValidationError as exc:
        logger.error("Malformed service row: %s", exc)
        return ServiceResult.failure(
            ServiceError(ErrorKind.UNKNOWN, get_safe_error_message(), detail=str(exc))
        )


class CatalogService:
    """
    Business logic for the services catalog.

    - Public listing shows only active items, newest first.
    - Admin CRUD (enforced at router via require_admin and by the store).
    """

    def __init__(self, repo: ServiceRepository):
        self.repo = repo

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()

    def _row_or_not_found(self, row: dict[str, Any] | None) -> ServiceResult[ServiceRead]:
        if row is None:
            return ServiceResult.failure(ServiceError(ErrorKind.NOT_FOUND, NOT_FOUND_MESSAGE))
        return _to_read(row)

    # ----- Public -----

    def get_all_services(self, client: Client | None) -> ServiceResult[list[ServiceRead]]:
        """Active services; the placeholder catalog when there is no backend."""
        if client is None:
            return ServiceResult.fallback(
                [ServiceRead.model_validate(s) for s in PLACEHOLDER_SERVICES]
            )
        try:
            rows = self.repo.list_services(client, only_active=True)
        except GATEWAY_ERRORS as exc:
            logger.error("Error loading services: %s", exc)
            return ServiceResult.failure(ServiceError.from_exception(exc))
        return _to_read(rows)

    def get_featured_services(self, client: Client | None, limit: int = 3) -> ServiceResult[list[ServiceRead]]:
        """First `limit` items of get_all_services; no extra query."""
        result = self.get_all_services(client)
        if not result.ok:
            return ServiceResult.success([])
        return ServiceResult(data=(result.data or [])[:limit], degraded_by=result.degraded_by)

    def get_service_by_id(self, client: Client | None, service_id: str) -> ServiceResult[ServiceRead]:
        if client is None:
            return ServiceResult.failure(ServiceError.backend_unavailable())
        try:
            row = self.repo.get_by_id(client, service_id)
        except GATEWAY_ERRORS as exc:
            logger.error("Error loading service %s: %s", service_id, exc)
            return ServiceResult.failure(ServiceError.from_exception(exc))
        return self._row_or_not_found(row)

    # ----- Admin -----

    def create_service(
        self,
        client: Client | None,
        payload: ServiceCreate | dict[str, Any],
    ) -> ServiceResult[ServiceRead]:
        if client is None:
            return ServiceResult.failure(ServiceError.backend_unavailable())
        try:
            data = payload if isinstance(payload, ServiceCreate) else ServiceCreate.model_validate(payload)
        except ValidationError as exc:
            return ServiceResult.failure(
                ServiceError(ErrorKind.VALIDATION_FAILED, INVALID_SERVICE_MESSAGE, detail=str(exc))
            )
        try:
            row = self.repo.create(client, data.model_dump())
        except GATEWAY_ERRORS as exc:
            logger.error("Error creating service: %s", exc)
            return ServiceResult.failure(ServiceError.from_exception(exc))
        return self._row_or_not_found(row)

    def update_service(
        self,
        client: Client | None,
        service_id: str,
        updates: ServiceUpdate | dict[str, Any],
    ) -> ServiceResult[ServiceRead]:
        """Partial update; only fields that were set are sent, plus updated_at."""
        if client is None:
            return ServiceResult.failure(ServiceError.backend_unavailable())
        try:
            data = updates if isinstance(updates, ServiceUpdate) else ServiceUpdate.model_validate(updates)
        except ValidationError as exc:
            return ServiceResult.failure(
                ServiceError(ErrorKind.VALIDATION_FAILED, INVALID_SERVICE_MESSAGE, detail=str(exc))
            )

        values = {**data.model_dump(exclude_unset=True), "updated_at": self._now()}
        try:
            row = self.repo.update(client, service_id, values)
        except GATEWAY_ERRORS as exc:
            logger.error("Error updating service %s: %s", service_id, exc)
            return ServiceResult.failure(ServiceError.from_exception(exc))
        return self._row_or_not_found(row)

    def delete_service(self, client: Client | None, service_id: str) -> ServiceResult[bool]:
        if client is None:
            return ServiceResult.failure(ServiceError.backend_unavailable())
        try:
            self.repo.delete(client, service_id)
        except GATEWAY_ERRORS as exc:
            logger.error("Error deleting service %s: %s", service_id, exc)
            return ServiceResult.failure(ServiceError.from_exception(exc))
        return ServiceResult.success(True)

    def toggle_service_status(
        self,
        client: Client | None,
        service_id: str,
        active: bool,
    ) -> ServiceResult[ServiceRead]:
        """Show or hide a service on the public listing."""
        if client is None:
            return ServiceResult.failure(ServiceError.backend_unavailable())
        try:
            row = self.repo.update(
                client, service_id, {"active": bool(active), "updated_at": self._now()}
            )
        except GATEWAY_ERRORS as exc:
            logger.error("Error toggling service %s: %s", service_id, exc)
            return ServiceResult.failure(ServiceError.from_exception(exc))
        return self._row_or_not_found(row)
