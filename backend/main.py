"""
Section library FastAPI application.

Entry point for the API server.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend import config
from backend.routes import admin as admin_routes
from backend.routes import sections as section_routes
from backend.routes import themes as theme_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Startup applies LOG_LEVEL and reports where the library is read from.
    Nothing to tear down: the library is plain files and remote calls use
    per-request clients.
    """
    logging.basicConfig(
        level=config.settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "Section library starting (%s). Roots: %s",
        config.settings.ENVIRONMENT,
        ", ".join(str(r) for r in config.settings.LIBRARY_ROOTS),
    )
    logger.info("Preview cache: %s", config.settings.PREVIEW_CACHE_DIR)
    logger.info("Authorized shops: %d", len(config.settings.SHOP_ACCESS_TOKENS))

    yield

    logger.info("Section library stopped")


app = FastAPI(
    title="Section Library",
    docs_url=None,
    redoc_url=None,
    lifespan=lifespan,
)

# Register routes
app.include_router(admin_routes.router)
app.include_router(section_routes.router)
app.include_router(theme_routes.router)


@app.get("/health")
async def health():
    """Health check endpoint for uptime monitoring."""
    return {"status": "ok"}
