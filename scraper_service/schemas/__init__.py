"""Pydantic schemas package."""

from scraper_service.schemas.common import HealthResponse, VersionResponse  # noqa: F401
from scraper_service.schemas.scrape import (  # noqa: F401
    ScrapedDocumentSchema,
    ScrapeErrorResponse,
    ScrapeMetaSchema,
    ScrapeRequest,
    ScrapeResponse,
)
