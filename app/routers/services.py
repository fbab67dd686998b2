# app/routers/services.py
from fastapi import APIRouter, Depends, status
from supabase import Client

from app.core.auth import require_admin
from app.dependencies import get_catalog_service, get_gateway
from app.routers._results import unwrap
from app.schemas.service import (
    ServiceActiveUpdate,
    ServiceCreate,
    ServiceRead,
    ServiceUpdate,
)
from app.services.catalog_service import CatalogService

router = APIRouter(prefix="/services", tags=["Services"])


# -------- Public endpoints --------


@router.get("", response_model=list[ServiceRead])
def list_services(
    client: Client | None = Depends(get_gateway),
    service: CatalogService = Depends(get_catalog_service),
):
    """
    List active services.
    - Public endpoint.
    - Without a configured backend the placeholder catalog is returned.
    """
    return unwrap(service.get_all_services(client))


@router.get("/featured", response_model=list[ServiceRead])
def list_featured_services(
    limit: int = 3,
    client: Client | None = Depends(get_gateway),
    service: CatalogService = Depends(get_catalog_service),
):
    """First `limit` active services for the homepage."""
    return unwrap(service.get_featured_services(client, limit=limit))


@router.get("/{service_id}", response_model=ServiceRead)
def get_service(
    service_id: str,
    client: Client | None = Depends(get_gateway),
    service: CatalogService = Depends(get_catalog_service),
):
    return unwrap(service.get_service_by_id(client, service_id))


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=ServiceRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_service(
    payload: ServiceCreate,
    client: Client | None = Depends(get_gateway),
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Create a new service (admin only).
    """
    return unwrap(service.create_service(client, payload))


@router.patch(
    "/{service_id}",
    response_model=ServiceRead,
    dependencies=[Depends(require_admin)],
)
def update_service(
    service_id: str,
    payload: ServiceUpdate,
    client: Client | None = Depends(get_gateway),
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Update an existing service (admin only).
    """
    return unwrap(service.update_service(client, service_id, payload))


@router.patch(
    "/{service_id}/active",
    response_model=ServiceRead,
    dependencies=[Depends(require_admin)],
)
def toggle_service(
    service_id: str,
    payload: ServiceActiveUpdate,
    client: Client | None = Depends(get_gateway),
    service: CatalogService = Depends(get_catalog_service),
):
    """Show/hide a service on the public listing (admin only)."""
    return unwrap(service.toggle_service_status(client, service_id, payload.active))


@router.delete(
    "/{service_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_service(
    service_id: str,
    client: Client | None = Depends(get_gateway),
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Delete a service (admin only).
    """
    unwrap(service.delete_service(client, service_id))
