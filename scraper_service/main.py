"""FastAPI application entry point for webnovel-scraper-service.

Configures middleware, exception handlers, lifecycle hooks, and routes.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scraper_service.core.config import settings
from scraper_service.routes import api, health
from scraper_service.routes.health import SERVICE_NAME, SERVICE_VERSION, build_health
from scraper_service.routes.scrape import router as scrape_router
from scraper_service.schemas.common import HealthResponse

# ---------------------------------------------------------------------------
# Logging Configuration
# ---------------------------------------------------------------------------

# Configure root logger with level from settings
logging.basicConfig(
    level=settings.get_log_level_int(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup / shutdown lifecycle."""
    # --- Startup ---
    logger.info(
        "Starting %s (env=%s, port=%d)",
        SERVICE_NAME,
        settings.service_env,
        settings.port,
    )
    logger.info(
        "Fetch policy: %d attempts, %.0fs timeout, %d redirects max",
        settings.scrape_max_attempts,
        settings.scrape_request_timeout,
        settings.scrape_max_redirects,
    )

    yield

    # --- Shutdown ---
    logger.info("Shutting down %s", SERVICE_NAME)


# ---------------------------------------------------------------------------
# App instance
# ---------------------------------------------------------------------------

app = FastAPI(
    title="webnovel-scraper API",
    version=SERVICE_VERSION,
    docs_url="/docs",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    """Log every request with method, path, status, and duration."""
    start = time.monotonic()
    response = await call_next(request)
    duration_ms = (time.monotonic() - start) * 1000
    logger.info(
        "%s %s -> %d (%.1fms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


# ---------------------------------------------------------------------------
# Global exception handler
# ---------------------------------------------------------------------------


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler that returns a structured JSON error."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    content = {
        "status": 500,
        "error": "Internal server error",
        "message": "An unexpected error occurred. Please try again later.",
    }
    if settings.debug:
        content["details"] = {"exception": repr(exc)}
    return JSONResponse(status_code=500, content=content)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

# Health check at /health (no prefix)
app.include_router(health.router)

# API v1 routes
app.include_router(api.router, prefix="/api/v1")

# Scrape routes (prefixed with /api/v1)
app.include_router(scrape_router)


# Additional health endpoint under API prefix for consistency
@app.get("/api/v1/health", tags=["health"], response_model=HealthResponse)
async def api_health_check():
    """Health check under the /api/v1 prefix."""
    return build_health()
