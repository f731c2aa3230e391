from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from bookstore import __version__
from bookstore.api.v1.router import router as api_v1_router
from bookstore.config.settings import Settings, get_settings
from bookstore.container import AppContainer
from bookstore.core.logging import get_logger, setup_logging
from bookstore.core.middleware import register_exception_handlers, register_middlewares
from bookstore.db.init_db import init_db
from bookstore.schemas.common.response import HealthResponse

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures logging, title, version and debug mode from Settings.
    - Builds the AppContainer and stores it on ``app.state.container``.
    - Registers CORS, core middleware, and exception handlers.
    - Includes the versioned API router under /api/v1.
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    container = AppContainer.build(settings, engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # For production, manage the schema with migrations instead
        if not settings.is_production():
            init_db(container.engine)
        container.seed_admin()
        logger.info("Application started", environment=settings.ENVIRONMENT)
        yield
        container.engine.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_ORIGINS != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_middlewares(app)
    register_exception_handlers(app)

    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    def health() -> HealthResponse:
        return HealthResponse(
            app=settings.APP_NAME,
            version=__version__,
            api_version=settings.API_VERSION,
            environment=settings.ENVIRONMENT,
        )

    return app
