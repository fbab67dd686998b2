# app/routers/_results.py
from fastapi import HTTPException, status

from app.core.errors import ErrorKind, ServiceResult

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.BACKEND_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.AUTH_FAILED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_AUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_AUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.VALIDATION_FAILED: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorKind.PROFILE_INCONSISTENT: status.HTTP_409_CONFLICT,
    ErrorKind.UNKNOWN: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def unwrap(result: ServiceResult):
    """
    Return result.data, or raise the HTTPException matching its error.

    Only the user-safe message goes into `detail`.
    """
    if result.error is None:
        return result.data
    err = result.error
    detail: dict[str, str] = {"kind": err.kind.value, "message": err.message}
    if err.code:
        detail["code"] = err.code
    raise HTTPException(
        status_code=STATUS_BY_KIND.get(err.kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail=detail,
    )
