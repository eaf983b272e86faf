"""FastAPI application factory."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from faceoff import __version__
from faceoff.api.errors import register_exception_handlers
from faceoff.api.presence import PresenceTracker
from faceoff.api.routes import presence_router, router
from faceoff.core.config import AppConfig
from faceoff.engine import FaceoffEngine

logger = structlog.get_logger()


def create_app(config: AppConfig | None = None, engine: FaceoffEngine | None = None) -> FastAPI:
    """Build the HTTP application.

    Args:
        config: Application configuration; defaults apply when omitted.
        engine: Pre-built engine, mainly for tests. Built from ``config``
            when omitted.

    Returns:
        Configured FastAPI app with the engine on ``app.state.engine``.
    """
    config = config or (engine.config if engine else AppConfig())
    engine = engine or FaceoffEngine(config)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        logger.info("server_start", version=__version__)
        yield
        await engine.close()
        logger.info("server_stop")

    app = FastAPI(
        title="Faceoff API",
        description="Vote between two profiles and rank them by win rate",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.engine = engine
    app.state.presence = PresenceTracker()

    register_exception_handlers(app)
    app.include_router(router)
    app.include_router(presence_router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy", "service": "faceoff"}

    return app
