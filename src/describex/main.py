"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from describex.api.pages import router as pages_router
from describex.api.routes import router
from describex.backend.service import HttpBackend
from describex.config import get_settings
from describex.imaging.workers import WorkerPool
from describex.ui.controller import build_controller

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: initialize on startup, clean up on shutdown."""
    settings = get_settings()
    app.state.settings = settings

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    logger.info(
        "Starting describex (backend=%s, format=%s, size=%s, replicated=%s)",
        settings.backend_url,
        settings.image_format,
        settings.image_size,
        settings.default_replicated,
    )

    worker_pool = WorkerPool(settings)
    backend = HttpBackend.from_settings(settings)
    app.state.worker_pool = worker_pool
    app.state.controller = build_controller(settings, worker_pool, backend)

    logger.info("describex ready")
    yield

    logger.info("Shutting down describex")
    await app.state.controller.wait_idle()
    await backend.aclose()
    worker_pool.shutdown()
    logger.info("describex shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title="describex",
        description="Browser client that classifies an image remotely and describes the top label",
        version="0.1.0",
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(pages_router)
    application.include_router(router)
    return application


app = create_app()


def run() -> None:
    """Serve the application with uvicorn using the configured host and port."""
    settings = get_settings()
    uvicorn.run("describex.main:app", host=settings.host, port=settings.port)
