import pytest

from app.core.config import Settings
from app.core.session_store import SessionStore
from app.repositories.booking_repo import BookingRepository
from app.repositories.profile_repo import ProfileRepository
from app.repositories.service_repo import ServiceRepository
from app.repositories.stats_repo import StatsRepository
from app.services.auth_service import AuthService
from app.services.booking_service import BookingService
from app.services.catalog_service import CatalogService
from app.services.stats_service import StatsService

from tests.fakes import FakeClient


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def settings():
    return Settings(_env_file=None, SITE_URL="https://twodayspilot.test")


@pytest.fixture
def auth_service(settings):
    return AuthService(ProfileRepository(), settings=settings)


@pytest.fixture
def booking_service():
    return BookingService(BookingRepository(), ProfileRepository())


@pytest.fixture
def catalog_service():
    return CatalogService(ServiceRepository())


@pytest.fixture
def stats_service(booking_service):
    return StatsService(StatsRepository(), booking_service)


