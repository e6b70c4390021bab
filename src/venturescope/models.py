"""Domain models used across the enrichment pipeline."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EnrichmentRequest(BaseModel):
    """Inbound request body for the enrichment endpoint."""

    website: Optional[str] = None


class ScrapeResult(BaseModel):
    """Rendered text and outbound links of a single scraped page."""

    content: str = ""
    links: List[str] = Field(default_factory=list)


class SubpageCandidate(BaseModel):
    """A same-origin, topic-matching link selected for a follow-up fetch."""

    url: str


class Signal(BaseModel):
    """Named due-diligence indicator with a boolean verdict."""

    model_config = ConfigDict(extra="forbid")

    signal: str
    detected: bool
    details: Optional[str] = None


class EnrichmentResult(BaseModel):
    """Structured company intelligence returned by the extraction stage.

    Every field is required. A payload missing any of them, or carrying
    extra keys, fails validation instead of producing a partial result.
    """

    model_config = ConfigDict(extra="forbid")

    summary: str
    what_they_do: List[str]
    keywords: List[str]
    signals: List[Signal]
    sources: List[str]


class EnrichmentResponse(BaseModel):
    success: bool = True
    data: EnrichmentResult


class ErrorResponse(BaseModel):
    error: str
