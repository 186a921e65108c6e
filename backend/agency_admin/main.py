"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agency_admin.config import get_settings
from agency_admin.infrastructure.dependencies import get_gateway_factory, get_workspace_registry
from agency_admin.infrastructure.logging.log_config import setup_logging
from agency_admin.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


async def _create_tables() -> None:
    """Create every table of the self-hosted schema if it does not exist yet."""
    from agency_admin.infrastructure.database import Base, get_engine

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Self-hosted schema is ready")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — configure logging, prepare the gateway, close sessions on exit."""
    settings = get_settings()
    setup_logging()

    if settings.gateway_backend == "sql":
        await _create_tables()
    else:
        logger.info("Using hosted gateway at %s", settings.gateway_url)

    yield

    # Shutdown
    get_workspace_registry().close_all()
    await get_gateway_factory().aclose()
    if settings.gateway_backend == "sql":
        from agency_admin.infrastructure.database import get_engine

        await get_engine().dispose()


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "agency_admin.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
