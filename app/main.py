# app/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from app.core.config import get_settings

# Routers
from app.routers.auth import router as auth_router
from app.routers.services import router as services_router
from app.routers.bookings import router as bookings_router
from app.routers.admin_stats import router as admin_stats_router
from app.routers.layout import router as layout_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Report whether a Supabase backend is configured. Without one the
        site still serves the placeholder catalog and empty listings.
    """
    if settings.supabase_configured:
        logger.info("✅ Startup: Supabase backend configured at %s", settings.SUPABASE_URL)
    else:
        logger.warning("⚠️ Startup: Supabase not configured, running with placeholder data")
    if not settings.SUPABASE_JWT_SECRET:
        logger.warning("⚠️ Startup: SUPABASE_JWT_SECRET not set, authenticated routes will return 503")
    yield


app = FastAPI(
    title=settings.PROJECT_NAME or "Two Days Pilot API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Versioned API prefix, e.g. /api/v1
app.include_router(auth_router, prefix=settings.API_V1_STR)
app.include_router(services_router, prefix=settings.API_V1_STR)
app.include_router(bookings_router, prefix=settings.API_V1_STR)
app.include_router(admin_stats_router, prefix=settings.API_V1_STR)
app.include_router(layout_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "two-days-pilot"}
