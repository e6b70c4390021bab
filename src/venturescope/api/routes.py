"""API routes exposing the enrichment pipeline."""

from __future__ import annotations

import logging
from typing import Callable

from fastapi import APIRouter, Body, Depends, Response
from fastapi.concurrency import run_in_threadpool

from venturescope.config import EnrichmentSettings
from venturescope.errors import EnrichmentError, InvalidInput, MissingConfiguration, UnexpectedFailure
from venturescope.models import EnrichmentRequest, EnrichmentResponse, ErrorResponse
from venturescope.services.pipeline import EnrichmentPipeline

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {status: {"model": ErrorResponse} for status in (400, 402, 429, 500, 502)}

CORS_ALLOWED_HEADERS = [
    "authorization",
    "x-client-info",
    "apikey",
    "content-type",
    "x-supabase-client-platform",
    "x-supabase-client-platform-version",
    "x-supabase-client-runtime",
    "x-supabase-client-runtime-version",
]

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": ", ".join(CORS_ALLOWED_HEADERS),
}

_pipeline: EnrichmentPipeline | None = None


def get_pipeline() -> EnrichmentPipeline:
    """Return the process-wide pipeline, building it from the environment on first use."""

    global _pipeline
    if _pipeline is None:
        try:
            settings = EnrichmentSettings.from_env()
        except (FileNotFoundError, ValueError) as exc:
            raise MissingConfiguration(str(exc)) from exc
        _pipeline = EnrichmentPipeline.from_settings(settings)
    return _pipeline


def get_pipeline_provider() -> Callable[[], EnrichmentPipeline]:
    """Return a callable that builds the pipeline only once the request has been validated."""

    return get_pipeline


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.options("/enrich", include_in_schema=False)
async def enrich_preflight() -> Response:
    """Answer any OPTIONS request, with or without pre-flight headers."""

    return Response(status_code=200, headers=CORS_HEADERS)


@router.post(
    "/enrich",
    response_model=EnrichmentResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def enrich_company(
    payload: EnrichmentRequest | None = Body(default=None),
    pipeline_provider: Callable[[], EnrichmentPipeline] = Depends(get_pipeline_provider),
) -> EnrichmentResponse:
    """Turn a company website into structured due-diligence intelligence."""

    website = payload.website if payload is not None else None
    if not (website or "").strip():
        raise InvalidInput()

    try:
        pipeline = pipeline_provider()
        result = await run_in_threadpool(pipeline.enrich, website)
    except EnrichmentError:
        raise
    except Exception as exc:
        logger.exception("enrich error")
        raise UnexpectedFailure(str(exc) or "Unknown error") from exc

    return EnrichmentResponse(success=True, data=result)
