"""Error taxonomy for the enrichment pipeline.

Every failure surfaced to a caller is an :class:`EnrichmentError` subclass.
The ``status_code`` attribute is the HTTP status the API answers with and
``kind`` is a stable machine-readable label.
"""

from __future__ import annotations

import openai
import requests
from pydantic import ValidationError

__all__ = [
    "EnrichmentError",
    "ExtractionFailure",
    "InvalidInput",
    "MissingConfiguration",
    "QuotaExhausted",
    "RateLimited",
    "SchemaViolation",
    "ScrapeFailure",
    "TransportFailure",
    "UnexpectedFailure",
    "UpstreamFetchFailure",
    "classify_exception",
]


class EnrichmentError(Exception):
    """Base class for classified enrichment failures."""

    status_code = 500
    kind = "unexpected_failure"
    default_message = "Unknown error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> dict[str, str]:
        return {"error": self.message}


class InvalidInput(EnrichmentError):
    status_code = 400
    kind = "invalid_input"
    default_message = "website is required"


class MissingConfiguration(EnrichmentError):
    kind = "missing_configuration"
    default_message = "Required configuration is missing"


class UpstreamFetchFailure(EnrichmentError):
    """A dependency could not be reached or answered with an error."""

    status_code = 502
    kind = "upstream_fetch_failure"
    default_message = "Failed to scrape website"


class TransportFailure(UpstreamFetchFailure):
    kind = "transport_failure"


class ScrapeFailure(UpstreamFetchFailure):
    kind = "scrape_failure"

    def __init__(self, upstream_status: int, message: str | None = None) -> None:
        self.upstream_status = upstream_status
        super().__init__(message or f"Failed to scrape website ({upstream_status})")


class RateLimited(EnrichmentError):
    status_code = 429
    kind = "rate_limited"
    default_message = "Rate limit exceeded. Please try again later."


class QuotaExhausted(EnrichmentError):
    status_code = 402
    kind = "quota_exhausted"
    default_message = "AI credits exhausted. Please add funds."


class SchemaViolation(EnrichmentError):
    status_code = 502
    kind = "schema_violation"
    default_message = "AI did not return structured data"


class ExtractionFailure(EnrichmentError):
    status_code = 502
    kind = "extraction_failure"
    default_message = "AI analysis failed"

    def __init__(self, upstream_status: int | None = None, message: str | None = None) -> None:
        self.upstream_status = upstream_status
        super().__init__(message)


class UnexpectedFailure(EnrichmentError):
    pass


def classify_exception(exc: BaseException) -> EnrichmentError:
    """Map any exception raised while enriching onto the closed taxonomy."""

    if isinstance(exc, EnrichmentError):
        return exc
    if isinstance(exc, requests.RequestException):
        return TransportFailure(f"Failed to scrape website: {exc}")
    if isinstance(exc, openai.APIConnectionError):
        return TransportFailure(f"Failed to reach extraction service: {exc}")
    if isinstance(exc, openai.APIStatusError):
        if exc.status_code == 429:
            return RateLimited()
        if exc.status_code == 402:
            return QuotaExhausted()
        return ExtractionFailure(exc.status_code)
    if isinstance(exc, ValidationError):
        return SchemaViolation()
    return UnexpectedFailure(str(exc) or type(exc).__name__)
