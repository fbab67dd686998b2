# app/core/errors.py
"""
Result/error types shared by every service.

Services never let a gateway failure escape: they return a ServiceResult
whose `error` is a ServiceError carrying a user-safe message. The raw
gateway error text only goes to the logs (`detail`).

`degraded_by` marks a result produced by a documented fallback policy
(empty listing, placeholder catalog, zeroed stats). Such a result has
`error=None` so the UI renders it normally.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Generic, TypeVar

import httpx
from supabase import AuthError, PostgrestAPIError

T = TypeVar("T")

# Failures raised by the supabase client that services convert to results.
GATEWAY_ERRORS = (PostgrestAPIError, AuthError, httpx.HTTPError)


class ErrorKind(str, enum.Enum):
    BACKEND_UNAVAILABLE = "backend_unavailable"
    AUTH_FAILED = "auth_failed"
    PROFILE_INCONSISTENT = "profile_inconsistent"
    RATE_LIMITED = "rate_limited"
    VALIDATION_FAILED = "validation_failed"
    NOT_AUTHENTICATED = "not_authenticated"
    NOT_AUTHORIZED = "not_authorized"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"


# Canned messages by failure context; internal detail is never shown.
SAFE_MESSAGES: dict[str, str] = {
    "auth": "Invalid email or password. Please try again.",
    "reset": "Failed to send reset link. Please try again later.",
    "profile": "Failed to update. Please try again.",
    "booking": "Failed to save booking. Please try again.",
    "generic": "An error occurred. Please try again.",
}

BACKEND_UNAVAILABLE_MESSAGE = "Service is temporarily unavailable. Please try again later."


def get_safe_error_message(context: str | None = None) -> str:
    """Return the canned user-facing sentence for a failure context."""
    return SAFE_MESSAGES.get(context or "generic", SAFE_MESSAGES["generic"])


@dataclass
class ServiceError:
    kind: ErrorKind
    message: str
    code: str | None = None
    detail: str | None = None

    @classmethod
    def backend_unavailable(cls) -> ServiceError:
        return cls(ErrorKind.BACKEND_UNAVAILABLE, BACKEND_UNAVAILABLE_MESSAGE)

    @classmethod
    def from_exception(cls, exc: Exception, context: str = "generic") -> ServiceError:
        """
        Wrap an unexpected gateway failure.

        Network errors count as the backend being unavailable; anything
        else is UNKNOWN with the context's canned message.
        """
        if isinstance(exc, httpx.HTTPError):
            return cls(
                ErrorKind.BACKEND_UNAVAILABLE,
                BACKEND_UNAVAILABLE_MESSAGE,
                detail=str(exc),
            )
        return cls(
            ErrorKind.UNKNOWN,
            get_safe_error_message(context),
            code=getattr(exc, "code", None),
            detail=getattr(exc, "message", None) or str(exc),
        )


@dataclass
class ServiceResult(Generic[T]):
    data: T | None = None
    error: ServiceError | None = None
    degraded_by: ErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        return cls(data=data)

    @classmethod
    def failure(cls, error: ServiceError) -> ServiceResult[T]:
        return cls(error=error)

    @classmethod
    def fallback(cls, data: T, kind: ErrorKind = ErrorKind.BACKEND_UNAVAILABLE) -> ServiceResult[T]:
        return cls(data=data, degraded_by=kind)
