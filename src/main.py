"""Main application entry point for the menu admin service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
"""

import logging
import os

from fastapi import FastAPI

from menu_admin_service.auth.session_store import InMemorySessionStore
from menu_admin_service.config.settings import Settings
from menu_admin_service.handlers.api_handler import create_app
from menu_admin_service.observability import configure_logging, setup_observability
from menu_admin_service.ratelimit.rate_limiter import FixedWindowRateLimiter, InMemoryCounterStore
from menu_admin_service.repositories.menu_repository import MenuRepository
from menu_admin_service.services.menu_service import MenuService

logger = logging.getLogger(__name__)


def create_application(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Configures logging
    2. Loads settings from the environment (refusing to start without secrets)
    3. Creates the menu repository and service
    4. Creates the session store and rate limiters
    5. Creates the FastAPI app and sets up observability

    Args:
        settings: Settings to use instead of loading them from the environment

    Returns:
        Configured FastAPI application instance

    Raises:
        ValueError: If ADMIN_PASSWORD or SESSION_SECRET is not configured
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Initializing menu admin service...")

    settings = settings or Settings.from_env()

    repository = MenuRepository(data_file=settings.data_file)
    menu_service = MenuService(repository=repository)
    logger.info(f"Menu repository configured - file: {settings.data_file}")

    session_store = InMemorySessionStore(ttl_seconds=settings.session_ttl_seconds)

    # Both limiters share one counter store, namespaced by limiter name
    counter_store = InMemoryCounterStore()
    login_limiter = FixedWindowRateLimiter(
        name="login",
        max_requests=settings.login_rate_limit,
        window_seconds=settings.rate_limit_window_seconds,
        store=counter_store,
    )
    api_limiter = FixedWindowRateLimiter(
        name="api",
        max_requests=settings.api_rate_limit,
        window_seconds=settings.rate_limit_window_seconds,
        store=counter_store,
    )
    logger.info(
        f"Rate limits configured - login: {settings.login_rate_limit}, "
        f"api: {settings.api_rate_limit} per {settings.rate_limit_window_seconds}s, "
        f"trusted proxy hops: {settings.trusted_proxy_hops}"
    )

    app = create_app(
        menu_service=menu_service,
        settings=settings,
        session_store=session_store,
        login_limiter=login_limiter,
        api_limiter=api_limiter,
    )

    setup_observability(app)

    logger.info(f"Menu admin service initialized successfully ({settings.environment})")

    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    # Create a placeholder app for test imports
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "3000"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Admin API: http://{host}:{port}/api/menu")
    logger.info(f"Public menu feed: http://{host}:{port}/data.json")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.getenv("ENVIRONMENT", "development") == "development",
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
        proxy_headers=False,
    )
