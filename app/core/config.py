# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_URL = "YOUR_SUPABASE_URL"
PLACEHOLDER_KEY = "YOUR_SUPABASE_ANON_KEY"


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Supabase credentials are optional on purpose: when they are missing the
    site keeps serving the placeholder catalog and empty listings instead of
    failing on startup.

    Env vars (.env):
      - SUPABASE_URL, SUPABASE_KEY (anon key)
      - SUPABASE_JWT_SECRET (verifies bearer tokens on admin routes)
      - SESSION_FILE (where the signed-in identity is cached; unset = memory)
      - SITE_URL (origin for password-reset and OAuth callback links)
      - PROFILE_SCHEMA_VERSION (1 = profiles without nationality, 2 = with)
    """

    PROJECT_NAME: str = "Two Days Pilot"
    API_V1_STR: str = "/api/v1"

    # Supabase
    SUPABASE_URL: str | None = None
    SUPABASE_KEY: str | None = None

    # JWT verification for the HTTP layer
    SUPABASE_JWT_SECRET: str | None = None
    SUPABASE_JWT_ALG: str = "HS256"

    # Local identity cache
    SESSION_FILE: str | None = None

    SITE_URL: str = ""
    PROFILE_SCHEMA_VERSION: int = 2

    DEFAULT_LANGUAGE: str = "en"
    CURRENCY_PREFIX: str = "RM"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def supabase_configured(self) -> bool:
        """True only when both URL and key are set to real values."""
        if not self.SUPABASE_URL or not self.SUPABASE_KEY:
            return False
        return (
            self.SUPABASE_URL != PLACEHOLDER_URL
            and self.SUPABASE_KEY != PLACEHOLDER_KEY
        )


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
