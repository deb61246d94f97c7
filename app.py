"""
app.py — FastAPI application factory and startup lifecycle.

This is the ASGI application object imported by uvicorn.
It wires the unit store, transition engine and unit service, registers
routers and middleware, and seeds demo units on startup.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bobox.controllers.units_controller import health_router, router as units_router
from bobox.controllers.units_controller import transitions_router
from bobox.repository.unit_repository import UnitRepository
from bobox.services.transition_service import TransitionEngine
from bobox.services.unit_service import UnitService
from bobox.utils.config import Settings, get_settings
from bobox.utils.logger import get_logger
from bobox.utils.middleware import RequestLoggingMiddleware


logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build and wire the FastAPI application.

    Every dependency is constructed here and exposed through app.state, so
    each app instance (and each test) owns an isolated unit store.
    """
    settings = settings or get_settings()

    # --- Store (canonical in-memory unit records) ---
    repository = UnitRepository()

    # --- Services ---
    transition_engine = TransitionEngine(repository=repository)
    unit_service = UnitService(repository=repository, engine=transition_engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Run startup initialization before accepting requests."""
        _startup(app, settings)
        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # --- Middleware ---
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Routers ---
    app.include_router(health_router)
    app.include_router(units_router, prefix=f"{settings.api_prefix}/units")
    app.include_router(transitions_router, prefix=settings.api_prefix)

    # --- Inject services into app.state for dependency resolution ---
    app.state.repository = repository
    app.state.transition_engine = transition_engine
    app.state.unit_service = unit_service

    return app


def _startup(app: FastAPI, settings: Settings) -> None:
    """Seed demo units. Idempotent: skipped when the store already has units."""
    repository: UnitRepository = app.state.repository

    if settings.seed_sample_data:
        logger.info("Startup: seeding sample units")
        repository.seed_sample_units()
    else:
        logger.info("Startup: sample seeding disabled")

    logger.info("Startup complete: %d units loaded", repository.count_units())


# Module-level app object for uvicorn
app = create_app()
