"""FastAPI application factory.

Routers
-------
    /scrape   — render one page and return its embed links
    /crawl    — site search + per-page embed scan
    /health   — liveness probe

Endpoints are plain ``def`` functions: FastAPI runs them in its worker
thread pool, which is where Playwright's sync API has to live.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from embedscout import __version__
from embedscout.logs import configure_logging

from embedscout.api.routers import crawl as crawl_router
from embedscout.api.routers import scrape as scrape_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging on startup."""
    configure_logging()
    logger.info("embed-scout API %s starting", __version__)
    yield
    logger.info("embed-scout API shutting down")


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="embed-scout API",
        description=(
            "Finds third-party video embed links on pages whose players are "
            "injected by script. Renders the page in headless Chromium, "
            "watches its network traffic and DOM, and resolves redirects."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(scrape_router.router, prefix="/scrape", tags=["scrape"])
    app.include_router(crawl_router.router, prefix="/crawl", tags=["crawl"])

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


# Module-level instance used by uvicorn:
#   uvicorn embedscout.api.app:app --reload
app = create_app()
