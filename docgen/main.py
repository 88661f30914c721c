"""Application entrypoint for the FastAPI service."""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import register_routers
from .api.dependencies import close_completion_gateway
from .core.logging_config import configure_logging
from .core.settings import Settings, get_settings


def create_application(settings: Settings | None = None) -> FastAPI:
    """Construct and configure the FastAPI application instance."""

    settings = settings or get_settings()
    configure_logging(settings.log_level)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=_lifespan,
    )
    _configure_cors(application, settings.allowed_origins)

    register_routers(application)

    return application


@asynccontextmanager
async def _lifespan(_: FastAPI) -> AsyncIterator[None]:
    yield
    await close_completion_gateway()


def _configure_cors(app: FastAPI, origins: Sequence[str] | None) -> None:
    allow_all = not origins
    allow_list = ["*"] if allow_all else list(origins or [])
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


app = create_application()

__all__ = ("app", "create_application")
