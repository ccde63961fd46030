"""Application factory for the web server."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from starlette.applications import Starlette
from starlette.routing import Route

from plantwatch.lib.db import close_db
from plantwatch.logging import configure, get_logger
from plantwatch.monitor.service import create_scanner

from .api.conditions import check_conditions
from .api.health import health_check

_logger = get_logger("server.entrypoint")


@asynccontextmanager
async def lifespan(app: Starlette) -> AsyncIterator[None]:
    """Application lifespan manager for startup/shutdown tasks."""
    app.state.scanner = create_scanner()
    _logger.info("Condition scanner ready")
    try:
        yield
    finally:
        await close_db()


def create_app() -> Starlette:
    """Create and configure the Starlette application.

    Database connections come from the get_db() pool per request. The
    condition monitor uses a persistent connection instead.

    Returns:
        Configured Starlette application instance.
    """
    configure()

    routes = [
        Route("/health", health_check),
        Route("/api/check-conditions", check_conditions),
        # Legacy plant API path, same handler
        Route("/plant/check-conditions/", check_conditions),
    ]

    return Starlette(routes=routes, lifespan=lifespan)
