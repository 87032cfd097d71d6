"""
FastAPI application initialization and configuration.
"""
import logging
from fastapi import FastAPI

from context import AppContext
from .middleware import log_requests_middleware
from .endpoints import (
    callback_router,
    health_router,
    home_router,
)

logger = logging.getLogger(__name__)


def create_app(context: AppContext) -> FastAPI:
    """Build the web front around an existing application context"""
    app = FastAPI(title="Playlist Converter", version="1.0.0")
    app.state.context = context

    # Add middleware
    app.middleware("http")(log_requests_middleware)

    # Register routers
    app.include_router(health_router)
    app.include_router(home_router)
    app.include_router(callback_router)

    logger.debug("FastAPI application initialized with all routers and middleware")
    return app
