"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, helpdesk.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from helpdesk.api.deps.dependencies import get_service_cache
from helpdesk.api.routers.error_handling import register_exception_handlers
from helpdesk.boundary.db.connection import get_async_engine
from helpdesk.configs import get_settings
from helpdesk.observability.logger import configure_logging
from helpdesk.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware
from .routers import health_router, rag_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger = logging.getLogger(__name__)

    # Startup
    logger.info("Pre-warming service cache...", extra={"environment": settings.environment})
    cache = get_service_cache()
    _ = cache.rag_storage
    _ = cache.document_processor
    _ = cache.retrieval_tool
    logger.info("Service cache pre-warmed")

    yield

    # Shutdown
    cache.clear()
    await get_async_engine().dispose()
    logger.info("Service cache cleared, database pool disposed")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="Support Desk Knowledge Base API",
        description="Retrieval-augmented knowledge base for customer-support agents",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    register_exception_handlers(app)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(rag_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "helpdesk.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
