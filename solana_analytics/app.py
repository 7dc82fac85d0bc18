"""
REST entry point for Solana Analytics.

This module initializes the FastAPI application, registers error handlers
and routes, and manages the analytics service lifecycle.
"""

import datetime
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from solana_analytics import __version__
from solana_analytics.api_routes import actions
from solana_analytics.api_routes.error_handlers import register_error_handlers
from solana_analytics.config import get_server_config
from solana_analytics.logging_config import get_logger
from solana_analytics.services.analytics_service import AnalyticsService

logger = get_logger(__name__)


def create_application(service: Optional[AnalyticsService] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        service: Pre-built analytics service. When omitted, one is created
            from environment configuration at startup and closed on shutdown.

    Returns:
        The configured FastAPI application
    """
    config = get_server_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = service is None
        app.state.analytics_service = service or AnalyticsService.create()
        logger.info("Application initialized successfully")

        yield

        logger.info("Application shutting down...")
        if owned:
            await app.state.analytics_service.close()
        logger.info("Shutdown complete")

    app = FastAPI(
        title="Solana Analytics API",
        description="Token prices, wallet activity, token risk scores and crypto news.",
        version=__version__,
        debug=config.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(actions.router)

    @app.get("/health", tags=["system"])
    async def health_check(request: Request) -> Dict[str, Any]:
        """Service status, version, environment and cache statistics."""
        return {
            "status": "healthy",
            "version": __version__,
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "environment": config.environment,
            "caches": request.app.state.analytics_service.cache_service.get_stats(),
        }

    return app
