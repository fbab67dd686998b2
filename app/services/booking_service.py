# app/services/booking_service.py
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
from app.core.session_store import SessionStore
from app.repositories.booking_repo import BookingRepository
from app.repositories.profile_repo import ProfileRepository
from app.schemas.booking import BookingCreate, BookingRead, BookingStatusUpdate

logger = logging.getLogger(__name__)

INITIAL_STATUS = "pending"


def _to_read(data: dict[str, Any] | list[dict[str, Any]]) -> ServiceResult:
    """
    Validate one row, or a list of rows, into BookingRead.

    A row the schema rejects (e.g. an unknown status) becomes an UNKNOWN
    failure with the generic message instead of an exception.
    """
    try:
        if isinstance(data, list):
            return ServiceResult.success([BookingRead.model_validate(r) for r in data])
        return ServiceResult.success(BookingRead.model_validate(data))
    except ValidationError as exc:
        logger.error("Malformed booking row: %s", exc)
        return ServiceResult.failure(
            ServiceError(ErrorKind.UNKNOWN, get_safe_error_message(), detail=str(exc))
        )


class BookingService:
    """
    Business logic for bookings.

    Responsibilities:
      - create bookings owned by the signed-in user, always `pending`
      - list/fetch bookings with their service embedded
      - merge owner profiles in with a separate query (profiles cannot be
        embedded across the auth boundary)
      - admin status decisions: pending -> approved | rejected

    Authorization is not checked here. The admin-only operations rely on
    the store's row-level security; callers should only expose them to
    verified admins.
    """

    def __init__(self, booking_repo: BookingRepository, profile_repo: ProfileRepository):
        self.booking_repo = booking_repo
        self.profile_repo = profile_repo

    # ---- internal helpers ----

    def _merge_profiles(self, client: Client, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Attach each booking's owner profile under `profiles`.

        Collects the distinct user ids, fetches them in ONE batch query and
        left-joins through a dict. Missing profiles (or a failed profile
        query) leave `profiles` as None.
        """
        user_ids = list(dict.fromkeys(str(r["user_id"]) for r in rows if r.get("user_id")))
        if not user_ids:
            return rows

        try:
            profiles = self.profile_repo.list_by_ids(client, user_ids)
        except GATEWAY_ERRORS as exc:
            logger.warning("Error loading profiles, continuing without them: %s", exc)
            profiles = []

        profile_map = {str(p["id"]): p for p in profiles}
        return [
            {**row, "profiles": profile_map.get(str(row.get("user_id")))}
            for row in rows
        ]

    def _list_with_profiles(
        self,
        client: Client | None,
        status: str | None = None,
        limit: int | None = None,
    ) -> ServiceResult[list[BookingRead]]:
        if client is None:
            return ServiceResult.fallback([])
        try:
            rows = self.booking_repo.list_all(client, status=status, limit=limit)
            rows = self._merge_profiles(client, rows)
        except GATEWAY_ERRORS as exc:
            logger.error("Error listing bookings: %s", exc)
            return ServiceResult.failure(ServiceError.from_exception(exc))
        return _to_read(rows)

    # ---- user-facing operations ----

    def create_booking(
        self,
        client: Client | None,
        store: SessionStore,
        payload: BookingCreate | dict[str, Any],
    ) -> ServiceResult[BookingRead]:
        """
        Create a booking for the signed-in user.

        Steps:
          1. Require a cached session (owner id comes from it, never from
             the payload).
          2. Validate/coerce the payload before any network call.
          3. Insert with status='pending'.
        """
        if client is None:
            return ServiceResult.failure(ServiceError.backend_unavailable())

        user = store.get()
        if user is None:
            return ServiceResult.failure(
                ServiceError(ErrorKind.NOT_AUTHENTICATED, "Please sign in to make a booking.")
            )

        try:
            data = payload if isinstance(payload, BookingCreate) else BookingCreate.model_validate(payload)
        except ValidationError as exc:
            return ServiceResult.failure(
                ServiceError(ErrorKind.VALIDATION_FAILED, get_safe_error_message("booking"), detail=str(exc))
            )

        values = {
            **data.model_dump(mode="json"),
            "user_id": str(user.id),
            "status": INITIAL_STATUS,
        }
        try:
            row = self.booking_repo.create(client, values)
        except GATEWAY_ERRORS as exc:
            logger.error("Booking insert failed for %s: %s", user.id, exc)
            return ServiceResult.failure(ServiceError.from_exception(exc, "booking"))

        if row is None:
            return ServiceResult.failure(
                ServiceError(ErrorKind.UNKNOWN, get_safe_error_message("booking"))
            )
        return _to_read(row)

    def get_user_bookings(self, client: Client | None, user_id) -> ServiceResult[list[BookingRead]]:
        """
        Bookings owned by `user_id`, newest first, each with its service.

        Without a backend this degrades to an empty list, not an error.
        """
        if client is None:
            return ServiceResult.fallback([])
        try:
            rows = self.booking_repo.list_for_user(client, user_id)
        except GATEWAY_ERRORS as exc:
            logger.error("Error loading bookings for %s: %s", user_id, exc)
            return ServiceResult.failure(ServiceError.from_exception(exc))
        return _to_read(rows)

    def get_booking_by_id(self, client: Client | None, booking_id: str) -> ServiceResult[BookingRead]:
        """
        One booking with its service, then a second lookup for the owner's
        profile. A failed profile lookup yields `profiles=None`.
        """
        if client is None:
            return ServiceResult.failure(ServiceError.backend_unavailable())
        try:
            row = self.booking_repo.get_by_id(client, booking_id)
        except GATEWAY_ERRORS as exc:
            logger.error("Error loading booking %s: %s", booking_id, exc)
            return ServiceResult.failure(ServiceError.from_exception(exc))

        if row is None:
            return ServiceResult.failure(ServiceError(ErrorKind.NOT_FOUND, "Booking not found."))

        profile = None
        try:
            if row.get("user_id"):
                profile = self.profile_repo.get_summary(client, row["user_id"])
        except GATEWAY_ERRORS as exc:
            logger.warning("Error loading profile for booking %s: %s", booking_id, exc)

        return _to_read({**row, "profiles": profile})

    # ---- admin operations ----

    def get_all_bookings(self, client: Client | None) -> ServiceResult[list[BookingRead]]:
        """All bookings, newest first, with services and owner profiles."""
        return self._list_with_profiles(client)

    def get_bookings_by_status(self, client: Client | None, status: str) -> ServiceResult[list[BookingRead]]:
        return self._list_with_profiles(client, status=status)

    def get_recent_bookings(self, client: Client | None, limit: int = 10) -> ServiceResult[list[BookingRead]]:
        return self._list_with_profiles(client, limit=limit)

    def update_booking_status(
        self,
        client: Client | None,
        booking_id: str,
        status: str,
        admin_message: str | None = None,
    ) -> ServiceResult[BookingRead]:
        """
        Record an admin decision.

          pending -> approved | rejected

        `admin_message` is written only when non-blank after trimming, so
        an existing message is never overwritten with an empty one.
        Concurrent decisions on the same booking are last-write-wins in
        the store.
        """
        if client is None:
            return ServiceResult.failure(ServiceError.backend_unavailable())
        try:
            decision = BookingStatusUpdate(status=status, admin_message=admin_message)
        except ValidationError as exc:
            return ServiceResult.failure(
                ServiceError(
                    ErrorKind.VALIDATION_FAILED,
                    "Status must be 'approved' or 'rejected'.",
                    detail=str(exc),
                )
            )

        values: dict[str, Any] = {
            "status": decision.status,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        message = (decision.admin_message or "").strip()
        if message:
            values["admin_message"] = message

        try:
            row = self.booking_repo.update(client, booking_id, values)
        except GATEWAY_ERRORS as exc:
            logger.error("Status update failed for booking %s: %s", booking_id, exc)
            return ServiceResult.failure(ServiceError.from_exception(exc, "booking"))

        if row is None:
            return ServiceResult.failure(ServiceError(ErrorKind.NOT_FOUND, "Booking not found."))
        return _to_read(row)

    def approve_booking(self, client: Client | None, booking_id: str) -> ServiceResult[BookingRead]:
        return self.update_booking_status(client, booking_id, "approved")

    def reject_booking(self, client: Client | None, booking_id: str) -> ServiceResult[BookingRead]:
        return self.update_booking_status(client, booking_id, "rejected")
