# app/services/auth_service.py
import logging
from datetime import datetime, timezone
from typing import Any, Callable
from urllib.parse import urlsplit

import httpx
from pydantic import ValidationError
from supabase import AuthError, Client, PostgrestAPIError

from app.core.config import Settings, get_settings
from app.core.errors import (
    GATEWAY_ERRORS,
    ErrorKind,
    ServiceError,
    ServiceResult,
    get_safe_error_message,
)
from app.core.session_store import SessionStore
from app.repositories.profile_repo import ProfileRepository
from app.schemas.auth import (
    EmailRequest,
    PasswordUpdate,
    SignInRequest,
    SignUpRequest,
    SignUpResult,
)
from app.schemas.profile import ProfileRead, ProfileUpdate
from app.schemas.session import SessionUser

logger = logging.getLogger(__name__)

# Profile columns that only exist from schema version 2 onwards.
OPTIONAL_PROFILE_COLUMNS: dict[str, int] = {"nationality": 2}

ALREADY_REGISTERED_MESSAGE = "This email is already registered. Please login instead."
UNUSABLE_EMAIL_MESSAGE = (
    "This email address cannot be used. It may already be registered, or there "
    "may be a validation issue. Please try a different email or login if you "
    "already have an account."
)
RATE_LIMITED_MESSAGE = "Too many attempts. Please wait a few minutes and try again."
EMAIL_NOT_CONFIRMED_MESSAGE = (
    "Your email address has not been confirmed. Please check your email for a "
    "confirmation link, or contact support if you need help."
)
SIGNUP_FAILED_MESSAGE = "Failed to create user. Please check your email format and try again."
SESSION_EXPIRED_MESSAGE = "Your session has expired. Please sign in again."
INVALID_INPUT_MESSAGE = "Please check the form and try again."


def _metadata(user) -> dict[str, Any]:
    return getattr(user, "user_metadata", None) or {}


def _default_name(user) -> str:
    """
    Display name for a user without a profile: metadata name, else the
    local part of the email, else "User".
    """
    name = _metadata(user).get("full_name")
    if name:
        return name
    email = getattr(user, "email", None) or ""
    return email.split("@", 1)[0] or "User"


def _validation_failure(exc: ValidationError) -> ServiceResult:
    return ServiceResult.failure(
        ServiceError(ErrorKind.VALIDATION_FAILED, INVALID_INPUT_MESSAGE, detail=str(exc))
    )


class AuthService:
    """
    Sign-up/sign-in and profile reconciliation.

    Responsibilities:
      - normalize credentials before they reach the auth provider
      - keep the `profiles` row in step with the auth identity
        (create when missing, repair a stale email)
      - normalize role casing
      - mirror the resulting SessionUser into the SessionStore

    Every public method returns a ServiceResult; provider and store
    failures never propagate as exceptions.
    """

    def __init__(self, profile_repo: ProfileRepository, settings: Settings | None = None):
        self.profile_repo = profile_repo
        self.settings = settings or get_settings()

    # ---- internal helpers ----

    def _map_auth_error(self, exc: Exception, context: str = "auth") -> ServiceError:
        """Translate a provider error into a user-safe ServiceError."""
        if isinstance(exc, httpx.HTTPError):
            return ServiceError.from_exception(exc, context)

        message = getattr(exc, "message", None) or str(exc)
        lowered = message.lower()
        status = getattr(exc, "status", None)
        logger.warning("Auth provider error (%s): %s", context, message)

        if "already registered" in lowered or "already exists" in lowered:
            return ServiceError(
                ErrorKind.AUTH_FAILED, ALREADY_REGISTERED_MESSAGE,
                code="user_already_exists", detail=message,
            )
        if context == "signup" and "invalid" in lowered and "email" in lowered:
            return ServiceError(ErrorKind.AUTH_FAILED, UNUSABLE_EMAIL_MESSAGE, detail=message)
        if "rate limit" in lowered or "too many" in lowered or status == 429:
            return ServiceError(ErrorKind.RATE_LIMITED, RATE_LIMITED_MESSAGE, detail=message)
        if "email not confirmed" in lowered or "email not verified" in lowered:
            return ServiceError(
                ErrorKind.AUTH_FAILED, EMAIL_NOT_CONFIRMED_MESSAGE,
                code="email_not_confirmed", detail=message,
            )
        return ServiceError(
            ErrorKind.AUTH_FAILED,
            get_safe_error_message(context),
            code=getattr(exc, "code", None),
            detail=message,
        )

    def _write_profile(
        self,
        write: Callable[[dict[str, Any]], dict[str, Any] | None],
        values: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Run a profile write, dropping columns the store does not have.

        Columns newer than PROFILE_SCHEMA_VERSION are removed up front.
        If the store still rejects an optional column, the write is
        retried once without it.
        """
        version = self.settings.PROFILE_SCHEMA_VERSION
        values = {
            k: v for k, v in values.items()
            if OPTIONAL_PROFILE_COLUMNS.get(k, 0) <= version
        }
        try:
            return write(values)
        except PostgrestAPIError as exc:
            message = (exc.message or "").lower()
            missing = [
                col for col in OPTIONAL_PROFILE_COLUMNS
                if col in values and "column" in message and col in message
            ]
            if not missing:
                raise
            # TODO: drop this retry once every deployment runs profile schema v2
            logger.warning(
                "profiles is missing column(s) %s; set PROFILE_SCHEMA_VERSION=1 "
                "or run the nationality migration",
                ", ".join(missing),
            )
            return write({k: v for k, v in values.items() if k not in missing})

    def _fetch_profile(self, client: Client, user_id) -> dict[str, Any] | None:
        try:
            return self.profile_repo.get_by_id(client, user_id)
        except GATEWAY_ERRORS as exc:
            logger.warning("Could not load profile %s: %s", user_id, exc)
            return None

    def _load_or_create_profile(self, client: Client, user) -> dict[str, Any]:
        """
        Return the user's profile row, creating it from auth metadata when
        missing. If that insert fails too, an in-memory default is used so
        sign-in never fails on a missing row.
        """
        profile = self._fetch_profile(client, user.id)
        if profile:
            return profile

        logger.warning("Profile not found, creating new profile for user %s", user.id)
        meta = _metadata(user)
        new_profile = {
            "id": str(user.id),
            "full_name": _default_name(user),
            "email": user.email,
            "phone": meta.get("phone"),
            "nationality": meta.get("nationality"),
            "role": "user",
        }
        try:
            created = self._write_profile(
                lambda v: self.profile_repo.insert(client, v), new_profile
            )
        except GATEWAY_ERRORS as exc:
            logger.error("Error creating profile for %s: %s", user.id, exc)
            return {**new_profile, "phone": None, "nationality": None}
        return created or new_profile

    def _sync_signup_profile(self, client: Client, user, req: SignUpRequest) -> dict[str, Any]:
        """
        Make the profile match what the user just submitted.

        Missing row -> upsert keyed by id. Existing row -> update only the
        fields that differ. Failures are logged; the sign-up still succeeds.
        """
        profile = self._fetch_profile(client, user.id)

        if not profile:
            values = {
                "id": str(user.id),
                "full_name": req.full_name,
                "phone": req.phone,
                "email": user.email,
                "role": "user",
            }
            if req.nationality:
                values["nationality"] = req.nationality
            try:
                return self._write_profile(
                    lambda v: self.profile_repo.upsert(client, v), values
                ) or values
            except GATEWAY_ERRORS as exc:
                logger.warning("Profile creation failed for %s: %s", user.id, exc)
                return values

        changes: dict[str, Any] = {}
        if profile.get("full_name") != req.full_name:
            changes["full_name"] = req.full_name
        if profile.get("phone") != req.phone:
            changes["phone"] = req.phone
        if req.nationality and profile.get("nationality") != req.nationality:
            changes["nationality"] = req.nationality
        if profile.get("email") != user.email:
            changes["email"] = user.email

        if changes:
            try:
                self._write_profile(
                    lambda v: self.profile_repo.update(client, user.id, v), changes
                )
            except GATEWAY_ERRORS as exc:
                logger.warning("Profile update failed for %s: %s", user.id, exc)
        return {**profile, **changes}

    def _upsert_pending_profile(self, client: Client, user, req: SignUpRequest) -> None:
        """Best-effort profile write for accounts awaiting email confirmation."""
        values = {
            "id": str(user.id),
            "full_name": req.full_name,
            "phone": req.phone,
            "email": getattr(user, "email", None) or req.email,
            "role": "user",
        }
        if req.nationality:
            values["nationality"] = req.nationality
        try:
            self._write_profile(lambda v: self.profile_repo.upsert(client, v), values)
        except GATEWAY_ERRORS as exc:
            logger.warning("Profile creation failed for unconfirmed user %s: %s", user.id, exc)

    def _site_link(self, page: str) -> str:
        site = self.settings.SITE_URL.rstrip("/")
        return f"{site}/{page}" if site.startswith("http") else ""

    def _same_site(self, url: str | None) -> bool:
        """True when `url` is http(s) on the same scheme and host as SITE_URL."""
        if not url or not self.settings.SITE_URL:
            return False
        target, site = urlsplit(url), urlsplit(self.settings.SITE_URL)
        return (
            target.scheme in ("http", "https")
            and (target.scheme, target.netloc.lower()) == (site.scheme, site.netloc.lower())
        )

    # ---- public operations ----

    def sign_up(
        self,
        client: Client | None,
        store: SessionStore,
        email: str,
        password: str,
        full_name: str,
        phone: str | None = None,
        nationality: str | None = None,
    ) -> ServiceResult[SignUpResult]:
        """
        Register a new account.

        With an immediate session the profile is created or brought up to
        date and the user is signed in locally. Without one (email
        confirmation pending) the profile write is attempted anyway and
        failures are tolerated.
        """
        if client is None:
            return ServiceResult.failure(ServiceError.backend_unavailable())
        try:
            req = SignUpRequest(
                email=email,
                password=password,
                full_name=full_name,
                phone=phone,
                nationality=nationality,
            )
        except ValidationError as exc:
            return _validation_failure(exc)

        try:
            res = client.auth.sign_up(
                {
                    "email": req.email,
                    "password": req.password,
                    "options": {
                        "data": {
                            "full_name": req.full_name,
                            "phone": req.phone,
                            "nationality": req.nationality,
                        }
                    },
                }
            )
        except (AuthError, httpx.HTTPError) as exc:
            return ServiceResult.failure(self._map_auth_error(exc, context="signup"))

        user, session = res.user, res.session
        if user is None:
            return ServiceResult.failure(
                ServiceError(ErrorKind.AUTH_FAILED, SIGNUP_FAILED_MESSAGE)
            )

        session_user = None
        if session is not None:
            profile = self._sync_signup_profile(client, user, req)
            session_user = SessionUser(
                id=user.id,
                email=user.email,
                full_name=req.full_name,
                phone=req.phone,
                role=profile.get("role"),
            )
            store.set(session_user)
        else:
            self._upsert_pending_profile(client, user, req)

        return ServiceResult.success(
            SignUpResult(
                user_id=user.id,
                email=user.email,
                confirmation_required=session is None,
                user=session_user,
            )
        )

    def sign_in(
        self,
        client: Client | None,
        store: SessionStore,
        email: str,
        password: str,
    ) -> ServiceResult[SessionUser]:
        """
        Authenticate and cache the resulting SessionUser.

        The role always comes from a fresh profile read, lower-cased.
        A missing profile is recreated; a stale profile email is repaired.
        """
        if client is None:
            return ServiceResult.failure(ServiceError.backend_unavailable())
        try:
            req = SignInRequest(email=email, password=password)
        except ValidationError as exc:
            return _validation_failure(exc)

        try:
            res = client.auth.sign_in_with_password(
                {"email": req.email, "password": req.password}
            )
        except (AuthError, httpx.HTTPError) as exc:
            return ServiceResult.failure(self._map_auth_error(exc, context="auth"))

        user = res.user
        if user is None:
            return ServiceResult.failure(
                ServiceError(ErrorKind.AUTH_FAILED, get_safe_error_message("auth"))
            )

        profile = self._load_or_create_profile(client, user)

        if profile.get("email") != user.email:
            try:
                self.profile_repo.update(client, user.id, {"email": user.email})
            except GATEWAY_ERRORS as exc:
                logger.warning("Failed to update email for %s: %s", user.id, exc)

        session_user = SessionUser(
            id=user.id,
            email=user.email,
            full_name=profile.get("full_name"),
            phone=profile.get("phone"),
            role=profile.get("role"),
        )
        store.set(session_user)
        return ServiceResult.success(session_user)

    def sign_out(
        self,
        client: Client | None,
        store: SessionStore,
        access_token: str | None = None,
    ) -> ServiceResult[None]:
        """
        Sign out at the provider (if any) and always clear the local session.

        A gateway built from a bearer token holds no provider session, so
        the token itself is revoked through the admin API.
        """
        error = None
        if client is not None:
            try:
                if access_token:
                    client.auth.admin.sign_out(access_token)
                else:
                    client.auth.sign_out()
            except GATEWAY_ERRORS as exc:
                logger.warning("Sign-out at provider failed: %s", exc)
                error = ServiceError.from_exception(exc)
        store.clear()
        return ServiceResult(error=error)

    def get_current_auth_user(
        self,
        client: Client | None,
        store: SessionStore,
    ) -> ServiceResult[SessionUser]:
        """
        Re-validate the cached session against the provider.

        No backend -> the cached value is returned as-is. No live user or a
        provider error -> the cache is cleared.
        """
        if client is None:
            return ServiceResult.success(store.get())

        try:
            res = client.auth.get_user()
        except AuthError as exc:
            store.clear()
            logger.info("Auth session no longer valid: %s", exc)
            return ServiceResult.failure(
                ServiceError(
                    ErrorKind.NOT_AUTHENTICATED, SESSION_EXPIRED_MESSAGE, detail=str(exc)
                )
            )
        except httpx.HTTPError as exc:
            store.clear()
            return ServiceResult.failure(ServiceError.from_exception(exc))

        user = res.user if res else None
        if user is None:
            store.clear()
            return ServiceResult.success(None)

        profile = self._fetch_profile(client, user.id)
        if not profile:
            logger.warning("Profile not found for user %s", user.id)
            profile = {"full_name": _default_name(user), "phone": None, "role": "user"}

        session_user = SessionUser(
            id=user.id,
            email=user.email,
            full_name=profile.get("full_name") or _default_name(user),
            phone=profile.get("phone"),
            role=profile.get("role"),
        )
        store.set(session_user)
        return ServiceResult.success(session_user)

    def update_profile(
        self,
        client: Client | None,
        store: SessionStore,
        user_id,
        updates: ProfileUpdate | dict[str, Any],
    ) -> ServiceResult[ProfileRead]:
        """
        Partial profile update; `updated_at` is stamped here.

        The cached session picks up the same fields only when it belongs
        to `user_id`.
        """
        if client is None:
            return ServiceResult.failure(ServiceError.backend_unavailable())
        try:
            payload = (
                updates if isinstance(updates, ProfileUpdate)
                else ProfileUpdate.model_validate(updates)
            )
        except ValidationError as exc:
            return _validation_failure(exc)

        changes = payload.model_dump(exclude_unset=True)
        if not changes:
            return ServiceResult.failure(
                ServiceError(ErrorKind.VALIDATION_FAILED, "Nothing to update.")
            )

        values = {**changes, "updated_at": datetime.now(timezone.utc).isoformat()}
        try:
            row = self._write_profile(
                lambda v: self.profile_repo.update(client, user_id, v), values
            )
        except GATEWAY_ERRORS as exc:
            logger.error("Profile update failed for %s: %s", user_id, exc)
            return ServiceResult.failure(ServiceError.from_exception(exc, "profile"))

        if row is None:
            return ServiceResult.failure(
                ServiceError(ErrorKind.NOT_FOUND, "Profile not found.")
            )

        store.merge(user_id, changes)
        return ServiceResult.success(ProfileRead.model_validate(row))

    def request_password_reset(
        self,
        client: Client | None,
        email: str,
        redirect_to: str | None = None,
    ) -> ServiceResult[None]:
        """
        Send the forgot-password email.

        `redirect_to` is honored only on SITE_URL's own origin; otherwise
        SITE_URL/reset-password.html, otherwise the provider default.
        """
        if client is None:
            return ServiceResult.failure(ServiceError.backend_unavailable())
        try:
            req = EmailRequest(email=email, redirect_to=redirect_to)
        except ValidationError as exc:
            return _validation_failure(exc)

        target = req.redirect_to if self._same_site(req.redirect_to) else ""
        if req.redirect_to and not target:
            logger.warning("Ignoring off-site password reset redirect: %s", req.redirect_to)
        target = target or self._site_link("reset-password.html")
        options = {"redirect_to": target} if target else {}

        try:
            client.auth.reset_password_for_email(req.email, options)
        except (AuthError, httpx.HTTPError) as exc:
            return ServiceResult.failure(self._map_auth_error(exc, context="reset"))
        return ServiceResult.success(None)

    def update_password(self, client: Client | None, new_password: str) -> ServiceResult[None]:
        """Set a new password for the user signed in through a reset link."""
        if client is None:
            return ServiceResult.failure(ServiceError.backend_unavailable())
        try:
            req = PasswordUpdate(password=new_password)
        except ValidationError as exc:
            return _validation_failure(exc)

        try:
            client.auth.update_user({"password": req.password})
        except (AuthError, httpx.HTTPError) as exc:
            return ServiceResult.failure(self._map_auth_error(exc, context="reset"))
        return ServiceResult.success(None)

    def resend_confirmation_email(self, client: Client | None, email: str) -> ServiceResult[None]:
        if client is None:
            return ServiceResult.failure(ServiceError.backend_unavailable())
        try:
            req = EmailRequest(email=email)
        except ValidationError as exc:
            return _validation_failure(exc)

        try:
            client.auth.resend({"type": "signup", "email": req.email})
        except (AuthError, httpx.HTTPError) as exc:
            return ServiceResult.failure(self._map_auth_error(exc, context="auth"))
        return ServiceResult.success(None)

    def sign_in_with_google(self, client: Client | None) -> ServiceResult[str]:
        """Start Google OAuth; returns the provider URL to send the browser to."""
        if client is None:
            return ServiceResult.failure(ServiceError.backend_unavailable())

        options = {}
        callback = self._site_link("auth-callback.html")
        if callback:
            options["redirect_to"] = callback
        try:
            res = client.auth.sign_in_with_oauth({"provider": "google", "options": options})
        except (AuthError, httpx.HTTPError) as exc:
            logger.error("Google sign-in error: %s", exc)
            return ServiceResult.failure(self._map_auth_error(exc, context="auth"))
        return ServiceResult.success(res.url)

    def get_access_token(self, client: Client | None) -> str | None:
        """Access token of the client's current provider session, if any."""
        if client is None:
            return None
        try:
            session = client.auth.get_session()
        except GATEWAY_ERRORS as exc:
            logger.warning("Could not read provider session: %s", exc)
            return None
        return session.access_token if session else None
