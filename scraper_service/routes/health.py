from datetime import datetime, timezone

from fastapi import APIRouter

from scraper_service.core.config import settings
from scraper_service.schemas.common import HealthResponse

router = APIRouter()

SERVICE_NAME = "webnovel-scraper-service"
SERVICE_VERSION = "0.1.0"

ENDPOINTS = {
    "scrape": "POST /api/v1/scrape",
    "scrape_query": "GET /api/v1/scrape?url=...",
    "version": "GET /api/v1/version",
}


def build_health() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        name=SERVICE_NAME,
        version=SERVICE_VERSION,
        environment=settings.service_env,
        timestamp=datetime.now(timezone.utc),
        endpoints=ENDPOINTS,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check():
    return build_health()
