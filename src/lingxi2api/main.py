"""
Main FastAPI application for Lingxi2API.

This module creates and configures the FastAPI application with all
middleware, routes, and error handlers.
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .api import v1_router
from .auth import SessionManager
from .core import (
    get_logger,
    get_settings,
    setup_logging,
    generate_request_id,
    Settings,
    Lingxi2APIError,
    log_error,
    log_request_start,
    log_request_end,
)
from .services import LingxiClient, OpenAIProxyService
from .utils import HTTPClient


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    settings: Settings = app.state.settings
    setup_logging(settings.logging)
    logger = get_logger(__name__)

    logger.info(
        "Starting Lingxi2API",
        version=settings.app_version,
        environment=settings.environment
    )

    http_client = HTTPClient(timeout=settings.lingxi.timeout, transport=app.state.transport)
    session_manager = SessionManager(http_client, settings.lingxi)
    client = LingxiClient(http_client, session_manager)

    app.state.http_client = http_client
    app.state.session_manager = session_manager
    app.state.proxy = OpenAIProxyService(client, session_manager, settings.lingxi)

    session_manager.start_auto_refresh()

    yield

    # Shutdown
    logger.info("Shutting down Lingxi2API")
    await session_manager.stop_auto_refresh()
    await http_client.close()


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Application settings. If None, uses settings from environment.
        transport: Optional httpx transport for all upstream calls.
    """
    settings = settings or get_settings()

    # Create FastAPI app
    app = FastAPI(
        title=settings.app_name,
        description=settings.app_description,
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.transport = transport

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=settings.server.cors_methods,
        allow_headers=settings.server.cors_headers,
    )

    # Add request logging middleware
    app.add_middleware(RequestLoggingMiddleware)

    # Include API routers
    app.include_router(v1_router)

    @app.get("/")
    async def root():
        """Service identification."""
        return {"ok": True, "name": settings.app_name}

    # Add health check endpoint
    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "timestamp": time.time()
        }

    # Add error handlers
    @app.exception_handler(Lingxi2APIError)
    async def lingxi2api_error_handler(request: Request, exc: Lingxi2APIError):
        """Handle Lingxi2API errors."""
        log_error(
            get_logger(__name__),
            exc,
            context={"method": request.method, "path": request.url.path}
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict()
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "message": exc.detail,
                    "type": "http_error"
                }
            }
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger = get_logger(__name__)
        log_error(
            logger,
            exc,
            context={
                "method": request.method,
                "url": str(request.url),
                "client": request.client.host if request.client else "unknown"
            }
        )

        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "message": str(exc) or "Internal error",
                    "type": "internal_error"
                }
            }
        )

    return app


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests."""

    def __init__(self, app):
        super().__init__(app)
        self.logger = get_logger(__name__)

    async def dispatch(self, request: Request, call_next):
        """Process request with logging."""
        start_time = time.time()

        # Get client info
        client_ip = request.client.host if request.client else "unknown"
        user_agent = request.headers.get("user-agent")
        request_id = request.headers.get("x-request-id") or generate_request_id()
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        # Log request start
        log_request_start(
            self.logger,
            method=request.method,
            path=request.url.path,
            client_ip=client_ip,
            user_agent=user_agent,
            request_id=request_id
        )

        # Process request
        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            self.logger.error(
                "Request processing failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
                request_id=request_id
            )
            status_code = 500
            raise

        # Log request end
        duration_ms = (time.time() - start_time) * 1000
        log_request_end(
            self.logger,
            method=request.method,
            path=request.url.path,
            status_code=status_code,
            duration_ms=duration_ms,
            request_id=request_id
        )

        response.headers["x-request-id"] = request_id
        return response


# Create app instance
app = create_app()


def run() -> None:
    """Run the server with uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "lingxi2api.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.reload,
        log_level=settings.logging.level.lower(),
        access_log=False,  # We handle logging ourselves
    )


if __name__ == "__main__":
    run()
