# SPDX-License-Identifier: Apache-2.0
"""FastAPI application exposing the render session control surface."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from popglobe import __version__
from popglobe.api.routers import session as session_router
from popglobe.api.services.sessions import CacheFactory, SessionHolder
from popglobe.api.utils.errors import EXCEPTION_HANDLERS
from popglobe.config import Settings
from popglobe.utils.cli_helpers import configure_logging_from_env


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    app.state.sessions.dispose()


def create_app(
    settings: Settings | None = None, cache_factory: CacheFactory | None = None
) -> FastAPI:
    """Build the API app; datasets load lazily on the first ``POST /v1/session``."""
    configure_logging_from_env()
    app = FastAPI(title="popglobe", version=__version__, lifespan=_lifespan)
    app.state.sessions = SessionHolder(settings or Settings.from_env(), cache_factory)
    for exc_type, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exc_type, handler)
    app.include_router(session_router.router)

    @app.get("/health", tags=["meta"])
    def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    return app
