# app/dependencies.py
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import Client

from app.core.config import get_settings
from app.core.session_store import SessionStore
from app.core.supabase_client import create_gateway
from app.repositories.booking_repo import BookingRepository
from app.repositories.profile_repo import ProfileRepository
from app.repositories.service_repo import ServiceRepository
from app.repositories.stats_repo import StatsRepository
from app.services.auth_service import AuthService
from app.services.booking_service import BookingService
from app.services.catalog_service import CatalogService
from app.services.stats_service import StatsService

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so public pages work for guests.
bearer_scheme = HTTPBearer(auto_error=False)

profile_repo = ProfileRepository()
booking_repo = BookingRepository()
service_repo = ServiceRepository()
stats_repo = StatsRepository()

auth_service = AuthService(profile_repo)
booking_service = BookingService(booking_repo, profile_repo)
catalog_service = CatalogService(service_repo)
stats_service = StatsService(stats_repo, booking_service)


def get_access_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    """Raw bearer token, unverified. Verification happens in app.core.auth."""
    return credentials.credentials if credentials else None


def get_gateway(token: str | None = Depends(get_access_token)) -> Client | None:
    """
    FastAPI dependency that yields a per-request Supabase client.

    The client acts as the caller (their token is forwarded), so the
    store's row-level security decides what they can read and write.
    None when Supabase is not configured.
    """
    return create_gateway(get_settings(), access_token=token)


def get_session_store() -> SessionStore:
    """A request-scoped, memory-only session cache."""
    return SessionStore()


def get_auth_service() -> AuthService:
    return auth_service


def get_booking_service() -> BookingService:
    return booking_service


def get_catalog_service() -> CatalogService:
    return catalog_service


def get_stats_service() -> StatsService:
    return stats_service
