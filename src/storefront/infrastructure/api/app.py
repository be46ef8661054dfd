"""FastAPI application factory."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from storefront.infrastructure.api import errors
from storefront.infrastructure.api.routers import cart, orders
from storefront.infrastructure.bootstrap import Services, default_services
from storefront.infrastructure.config import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(services: Services | None = None, settings: Settings | None = None) -> FastAPI:
    """Build the API around *services* (the JSON-backed defaults if omitted)."""
    settings = settings or get_settings()

    app = FastAPI(title="Storefront API", version="1.0.0")
    app.state.settings = settings
    app.state.services = services or default_services(settings)

    errors.install(app)
    app.include_router(orders.router)
    app.include_router(cart.router)

    @app.get("/health", tags=["Meta"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    logger.info("Storefront API ready (data dir %s)", settings.data_dir)
    return app
