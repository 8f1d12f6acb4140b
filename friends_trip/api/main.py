"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from friends_trip.api.middleware import RequestIDMiddleware, MetricsMiddleware
from friends_trip.api.v1 import bills, expenses
from friends_trip.infrastructure.database.models import Base
from friends_trip.infrastructure.database.session import build_engine, build_session_factory
from friends_trip.infrastructure.observability.logging import setup_logging
from friends_trip.config import Settings, settings


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Create and configure FastAPI application"""
    app_settings = app_settings or settings

    # Setup structured logging
    setup_logging(app_settings.log_level, app_settings.service_name)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if app_settings.create_tables_on_startup:
            Base.metadata.create_all(bind=app.state.db_engine)
        logging.info("Service started", extra={"database_url": app.state.db_engine.url.render_as_string()})
        yield
        app.state.db_engine.dispose()

    app = FastAPI(
        title="Friends Trip Split Bills",
        description="Shared trip expenses and per-participant settlement",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Storage handle lives with the app, not the module; connections open lazily
    app.state.settings = app_settings
    app.state.db_engine = build_engine(app_settings)
    app.state.session_factory = build_session_factory(app.state.db_engine)

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": app_settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(bills.router, prefix="/v1", tags=["bills"])
    app.include_router(expenses.router, prefix="/v1", tags=["expenses"])

    return app
