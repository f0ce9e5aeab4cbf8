"""
Application factory for the rates API.

Run with: uvicorn --factory rates_api.app:create_app
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI

from rates_api.core.config import Settings, get_settings
from rates_api.core.logging import configure_logging
from rates_api.repositories.base import RateStore, build_store
from rates_api.routers import rates as rates_router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, store: Optional[RateStore] = None) -> FastAPI:
    """Build the FastAPI app; the store is created here once and shared by all requests."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Rates API")
    if store is None:
        store = build_store(settings)
    app.state.settings = settings
    app.state.rate_store = store
    app.include_router(rates_router.router)

    @app.get("/health")
    def health():
        return {"status": "ok", "backend": settings.storage_backend}

    logger.info("Rates API ready (backend=%s, env=%s)", settings.storage_backend, settings.app_env)
    return app
