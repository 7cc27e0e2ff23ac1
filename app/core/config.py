# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - SUPABASE_URL
      - SUPABASE_KEY (anon key)
      - SUPABASE_JWT_SECRET (JWT signing secret from Supabase project settings)

    Optional:
      - SUPABASE_SERVICE_ROLE_KEY (backend client that bypasses RLS,
        also needed for Storage uploads)
    """

    PROJECT_NAME: str = "Audio Store Backend"
    API_V1_STR: str = "/api/v1"

    # Supabase config
    SUPABASE_URL: str
    SUPABASE_KEY: str

    # JWT verification (backend-side)
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"

    # Service role key bypasses RLS (backend only)
    SUPABASE_SERVICE_ROLE_KEY: str | None = None

    # Storage bucket holding product gallery images
    STORAGE_BUCKET: str = "product-images"

    # Checkout hand-off: orders are confirmed manually over WhatsApp
    WHATSAPP_NUMBER: str = "6287777212901"

    # Catalog / admin knobs
    COMPARE_LIMIT: int = 3
    LOW_STOCK_THRESHOLD: int = 5

    # Fallback cooldown when Supabase Auth rate-limits without "after N seconds"
    AUTH_COOLDOWN_SECONDS: int = 30

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5500",
        "http://127.0.0.1:5500",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
