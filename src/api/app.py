"""FastAPI application factory with lifespan management."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import partial

import requests
from fastapi import FastAPI

from src.config import get_config
from src.search.api_client import create_api_client


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize shared resources on startup, clean up on shutdown.

    Creates the HTTP session shared by all upstream calls and a factory
    that binds it to each caller's access token.
    """
    config = get_config()

    app.state.config = config
    app.state.http_session = requests.Session()
    app.state.client_factory = partial(
        create_api_client,
        config.api_url,
        session=app.state.http_session,
        timeout=config.request_timeout,
    )

    yield

    app.state.http_session.close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="Fetch a Friend",
        description="Dog adoption search and favorites over the Fetch dogs API",
        version="0.1.0",
        lifespan=lifespan,
    )

    from src.api.routes import router

    app.include_router(router)

    return app
