"""Chapter scraping REST endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from scraper_service.core.config import settings
from scraper_service.schemas.scrape import (
    ScrapeErrorResponse,
    ScrapeRequest,
    ScrapeResponse,
)
from scraper_service.services.extractors import (
    ExtractionConfig,
    ScrapeError,
    ScrapePipeline,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["scrape"])

_ERROR_RESPONSES = {
    status: {"model": ScrapeErrorResponse}
    for status in (400, 403, 404, 408, 422, 500, 502)
}


async def _run_scrape(url: object) -> ScrapeResponse | JSONResponse:
    pipeline = ScrapePipeline(ExtractionConfig.from_settings(settings))
    try:
        result = await pipeline.scrape(url)
    except ScrapeError as e:
        logger.warning(
            "Scrape failed for %s: %d %s - %s", url, e.status, e.error, e.message
        )
        return JSONResponse(status_code=e.status, content=e.to_payload())
    return ScrapeResponse.from_result(result)


@router.post("/scrape", response_model=ScrapeResponse, responses=_ERROR_RESPONSES)
async def scrape_chapter(request: ScrapeRequest):
    """Fetch a chapter page and return its clean narrative text.

    Args:
        request: Contains the URL to scrape.

    Returns:
        ScrapeResponse on success, otherwise a ScrapeErrorResponse body with
        the matching HTTP status (400, 403, 404, 408, 422, 500 or 502).
    """
    return await _run_scrape(request.url)


@router.get("/scrape", response_model=ScrapeResponse, responses=_ERROR_RESPONSES)
async def scrape_chapter_by_query(url: str | None = Query(None)):
    """Same as POST /scrape with the URL passed as a query parameter."""
    return await _run_scrape(url)
