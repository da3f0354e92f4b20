"""Main application entrypoint for DocVault."""

from fastapi import FastAPI

from docvault.api.v1 import routes_health
from docvault.api.v1.routes_items import router as items_router
from docvault.api.v1.routes_quality import router as quality_router
from docvault.api.v1.routes_upload import router as upload_router
from docvault.core.config import settings
from docvault.core.logging import setup_logging
from docvault.core.middleware import HTTPErrorLoggingMiddleware


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    # Initialize logging first
    setup_logging()

    app = FastAPI(
        title=settings.SERVICE_NAME,
        version=settings.SERVICE_VERSION,
    )
    app.add_middleware(HTTPErrorLoggingMiddleware)

    app.include_router(routes_health.router, tags=["health"])
    app.include_router(items_router)
    app.include_router(upload_router)
    app.include_router(quality_router)

    return app


# Export app instance for ASGI servers
app = create_app()
