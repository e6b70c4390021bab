"""FastAPI application entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from venturescope.api.routes import CORS_ALLOWED_HEADERS, router
from venturescope.errors import EnrichmentError, InvalidInput

logger = logging.getLogger(__name__)


async def _enrichment_error_handler(request: Request, exc: EnrichmentError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed (%s): %s", request.method, request.url.path, exc.kind, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = InvalidInput("Invalid request body: expected {\"website\": \"<string>\"}")
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


def create_app() -> FastAPI:
    app = FastAPI(title="Venturescope", description="Company website enrichment API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=CORS_ALLOWED_HEADERS,
    )
    app.add_exception_handler(EnrichmentError, _enrichment_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.include_router(router)
    app.include_router(router, prefix="/api")
    return app


app = create_app()
