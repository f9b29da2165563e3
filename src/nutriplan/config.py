"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

STORAGE_BACKENDS = frozenset({"file", "memory", "supabase"})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    mealdb_base_url: str = "https://www.themealdb.com/api/json/v1/1"
    openfoodfacts_base_url: str = "https://world.openfoodfacts.org"
    http_timeout_seconds: float = 15.0
    cache_ttl_seconds: int = 3600
    timezone: str = "UTC"
    storage_backend: str = "file"
    storage_path: str = ".nutriplan"
    storage_key: str = "nutriplan_foodlog"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_table: str = "kv_store"
    random_meal_count: int = 25
    search_debounce_seconds: float = 0.5
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_storage_backend(raw: str | None) -> str:
    """Normalize the configured storage backend name."""
    if raw is None:
        return "file"
    cleaned = raw.strip().lower()
    if not cleaned:
        return "file"
    if cleaned not in STORAGE_BACKENDS:
        raise ValueError(f"Unknown storage backend: {raw!r}")
    return cleaned
