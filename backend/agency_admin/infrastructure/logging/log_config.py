"""Logging setup for the admin API.

The app logs through a handful of named channels, each with its own level
in Settings:

    gateway  `agency_admin.infrastructure.gateway.*`: REST and SQL adapters
             plus the local function runner. Logs backend failures and
             malformed responses.
    stores   `agency_admin.stores.<table>` (the colored StoreLogger output
             for loads, mutations and bulk runs) and the services package,
             where stale reloads and partial writes are reported.
    auth     sign-in, session restore and the per-token workspace registry.
    sql      SQLAlchemy engine and pool chatter from the self-hosted backend.
    http     raw httpx / httpcore request traces behind the REST gateway.
    uvicorn  server access and error logs.

Everything else falls back to `log_level`.

    from agency_admin.infrastructure.logging.log_config import setup_logging
    setup_logging()   # once, from the FastAPI lifespan
"""

import logging
import sys

from agency_admin.config import Settings, get_settings


# ── Channel → logger names ───────────────────────────────────────────

CHANNELS: dict[str, tuple[str, ...]] = {
    "gateway": ("agency_admin.infrastructure.gateway",),
    "stores": ("agency_admin.stores", "agency_admin.application.services"),
    "auth": (
        "agency_admin.application.services.auth_service",
        "agency_admin.application.services.workspace_registry",
        "agency_admin.presentation.api.v1.endpoints.auth",
    ),
    "sql": ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite"),
    "http": ("httpx", "httpcore"),
    "uvicorn": ("uvicorn", "uvicorn.access", "uvicorn.error"),
}


def setup_logging(settings: Settings | None = None) -> None:
    """Install a stderr handler if none exists and apply per-channel levels.

    Channels are applied in order, so `auth` (a subset of the services
    package) overrides the broader `stores` level for its loggers.
    """
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))

    # uvicorn usually installs a handler; tests and scripts may not
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)-8s [%(name)s] %(message)s"))
        root.addHandler(handler)

    levels = {}
    for channel, logger_names in CHANNELS.items():
        raw = getattr(settings, f"log_level_{channel}", settings.log_level)
        levels[channel] = raw
        for name in logger_names:
            logging.getLogger(name).setLevel(_parse_level(raw))

    logging.getLogger(__name__).debug(
        "Logging configured: root=%s %s",
        settings.log_level,
        " ".join(f"{channel}={level}" for channel, level in levels.items()),
    )


def _parse_level(raw: str) -> int:
    """Level name to logging constant; unknown names mean INFO."""
    numeric = getattr(logging, raw.upper(), None)
    if isinstance(numeric, int):
        return numeric
    return logging.INFO
