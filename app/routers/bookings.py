# app/routers/bookings.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from supabase import Client

from app.core.auth import require_admin, require_auth
from app.core.session_store import SessionStore
from app.dependencies import get_booking_service, get_gateway, get_session_store
from app.routers._results import unwrap
from app.schemas.booking import (
    BookingCreate,
    BookingRead,
    BookingStatus,
    BookingStatusUpdate,
)
from app.schemas.session import SessionUser
from app.services.booking_service import BookingService

router = APIRouter(prefix="/bookings", tags=["Bookings"])


# -------- User endpoints --------


@router.post("", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreate,
    client: Client | None = Depends(get_gateway),
    store: SessionStore = Depends(get_session_store),
    current_user: SessionUser = Depends(require_auth),
    service: BookingService = Depends(get_booking_service),
):
    """
    Create a booking for the caller.

    The owner comes from the verified token and status is always
    'pending'; any client-sent user_id/status is ignored.
    """
    store.set(current_user)
    return unwrap(service.create_booking(client, store, payload))


@router.get("/me", response_model=list[BookingRead])
def list_my_bookings(
    client: Client | None = Depends(get_gateway),
    current_user: SessionUser = Depends(require_auth),
    service: BookingService = Depends(get_booking_service),
):
    """Caller's bookings, newest first."""
    return unwrap(service.get_user_bookings(client, current_user.id))


@router.get("/{booking_id}", response_model=BookingRead)
def get_booking(
    booking_id: str,
    client: Client | None = Depends(get_gateway),
    current_user: SessionUser = Depends(require_auth),
    service: BookingService = Depends(get_booking_service),
):
    """
    Get one booking with service and owner profile.

    - 404 if it does not exist or belongs to someone else (non-admins).
    """
    booking = unwrap(service.get_booking_by_id(client, booking_id))
    if booking.user_id != current_user.id and not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found",
        )
    return booking


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=list[BookingRead],
    dependencies=[Depends(require_admin)],
)
def list_all_bookings(
    status_filter: BookingStatus | None = Query(default=None, alias="status"),
    client: Client | None = Depends(get_gateway),
    service: BookingService = Depends(get_booking_service),
):
    """
    List all bookings (admin only), optionally filtered by status.
    """
    if status_filter is None:
        return unwrap(service.get_all_bookings(client))
    return unwrap(service.get_bookings_by_status(client, status_filter))


@router.patch(
    "/{booking_id}/status",
    response_model=BookingRead,
    dependencies=[Depends(require_admin)],
)
def update_booking_status(
    booking_id: str,
    payload: BookingStatusUpdate,
    client: Client | None = Depends(get_gateway),
    service: BookingService = Depends(get_booking_service),
):
    """
    Approve or reject a booking (admin only).

      pending -> approved, rejected
    """
    return unwrap(
        service.update_booking_status(
            client, booking_id, payload.status, payload.admin_message
        )
    )
