"""User Registry API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map every failure to the {success, message, ...} envelope
    - CORS configured from settings (not hardcoded)
    - Lifespan reads the Settings given to create_app() from app.state
    - Store created on startup via lifespan, kept on app.state, disposed on shutdown
    - Unreachable database at startup is fatal: lifespan raises, server exits non-zero

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - create_app() factory: tests build isolated apps; `app` kept for uvicorn
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from user_registry.api.error_handlers import register_error_handlers
from user_registry.api.routes import health, users
from user_registry.config import Settings, get_settings
from user_registry.core.errors import DatabaseUnavailableError
from user_registry.infrastructure.database import DatabaseSessionManager
from user_registry.infrastructure.memory_repository import InMemoryUserRepository
from user_registry.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


async def open_store(app: FastAPI, settings: Settings) -> None:
    """Attach the configured store to app.state or raise DatabaseUnavailableError."""
    app.state.memory_store = None
    app.state.db_manager = None
    if settings.uses_memory_store:
        app.state.memory_store = InMemoryUserRepository()
        logger.info("Using in-memory user store")
        return

    db_manager = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if not await db_manager.health_check():
        await db_manager.close()
        logger.critical("Database connection failed")
        raise DatabaseUnavailableError()
    if settings.database_create_schema:
        await db_manager.create_schema()
    app.state.db_manager = db_manager
    logger.info("Database connected successfully")


async def close_store(app: FastAPI) -> None:
    db_manager = getattr(app.state, "db_manager", None)
    if db_manager is not None:
        await db_manager.close()
        app.state.db_manager = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    await open_store(app, settings)
    logger.info(f"User Registry API started (environment: {settings.environment})")
    yield
    logger.info("User Registry API shutting down")
    await close_store(app)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application with routes and error handlers."""
    settings = settings or get_settings()
    application = FastAPI(
        title="User Registry API", version="1.0.0", lifespan=lifespan,
    )
    application.state.settings = settings
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Routes: explicit registration
    application.include_router(health.router)
    application.include_router(users.router)

    register_error_handlers(application)
    return application


app = create_app()


def run() -> None:
    """Console entry point: serve `app` on the configured host/port."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger.info(f"Starting User Registry API on port {settings.port}")
    uvicorn.run(
        "user_registry.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
