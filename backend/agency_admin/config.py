from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Agency Admin API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:8080"]

    # Remote data gateway: "rest" talks to the hosted backend,
    # "sql" uses a self-hosted relational database through SQLAlchemy.
    gateway_backend: str = "rest"
    gateway_url: str = "http://localhost:54321"
    gateway_anon_key: str = ""
    gateway_timeout: float = 10.0
    database_url: str = "sqlite:///./agency_admin.db"

    # Admin list screens
    bulk_concurrency: int = 10
    demo_analytics: bool = False

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine SQL queries
    log_level_http: str = "WARNING"          # httpx / httpcore outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_gateway: str = "INFO"          # gateway adapters
    log_level_stores: str = "INFO"           # entity stores and bulk actions
    log_level_auth: str = "INFO"             # sign-in and workspace sessions

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
