"""Hypermodel API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Model registry built once in create_app() by explicit registration and
      shared read-only through app.state
    - Global error handlers render every failure as a JSON:API error document
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - App factory: tests build an app with their own settings/declarations;
      the module-level `app` serves uvicorn
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Iterable, Mapping

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hypermodel.api.error_handlers import register_error_handlers
from hypermodel.api.routes import health, resources
from hypermodel.config import Settings, get_settings
from hypermodel.core.model_registry import build_registry
from hypermodel.db.base import Base
from hypermodel.definitions import MODEL_DECLARATIONS
from hypermodel.infrastructure.database import init_db
from hypermodel.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    db_manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_create_tables:
        async with db_manager.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    app.state.db_manager = db_manager
    logger.info(
        f"Hypermodel API started with types {app.state.registry.get_all_types()}",
    )
    yield
    logger.info("Hypermodel API shutting down")
    await db_manager.dispose()


def create_app(
    settings: Settings | None = None,
    declarations: Iterable[Mapping[str, Any]] = MODEL_DECLARATIONS,
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title="Hypermodel API", version="1.0.0", lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.api_prefix = settings.api_prefix
    app.state.registry = build_registry(declarations)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(resources.router, prefix=settings.api_prefix)

    register_error_handlers(app, expose_stack=settings.expose_error_stack)
    return app


app = create_app()
