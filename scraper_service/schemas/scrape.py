"""Pydantic v2 schemas for the scrape endpoint.

Field names are exposed in camelCase on the wire to match the reader client.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from scraper_service.services.extractors.base import ScrapeResult


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScrapeRequest(BaseModel):
    """Body for POST /api/v1/scrape."""

    # Untyped so every URL problem surfaces as a scrape error (400)
    url: Any = Field(None, description="Chapter URL to scrape")


class ScrapedDocumentSchema(_CamelModel):
    title: str
    content: str
    url: str
    word_count: int
    extracted_at: datetime


class ScrapeMetaSchema(_CamelModel):
    encoding: str
    encoding_source: str
    extraction_method: str
    processing_time: datetime = Field(
        ..., description="Completion timestamp of the scrape"
    )
    elapsed_ms: float


class ScrapeResponse(_CamelModel):
    """Successful scrape payload."""

    success: bool = True
    data: ScrapedDocumentSchema
    meta: ScrapeMetaSchema

    @classmethod
    def from_result(cls, result: ScrapeResult) -> ScrapeResponse:
        document = result.document
        return cls(
            data=ScrapedDocumentSchema(
                title=document.title,
                content=document.content,
                url=document.url,
                word_count=document.word_count,
                extracted_at=document.extracted_at,
            ),
            meta=ScrapeMetaSchema(
                encoding=result.encoding.codec,
                encoding_source=result.encoding.source.value,
                extraction_method=document.extraction_method,
                processing_time=datetime.now(timezone.utc),
                elapsed_ms=round(result.processing_time_ms, 1),
            ),
        )


class ScrapeErrorResponse(BaseModel):
    """Failed scrape payload; ``status`` mirrors the HTTP status code."""

    status: int
    error: str
    message: str
    details: dict[str, Any] | None = None
