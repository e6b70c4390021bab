"""Structured company extraction through a generative model."""

from __future__ import annotations

import logging
from typing import Any, List, Sequence

import openai
from openai import OpenAI
from pydantic import ValidationError

from venturescope.errors import (
    ExtractionFailure,
    QuotaExhausted,
    RateLimited,
    SchemaViolation,
    TransportFailure,
)
from venturescope.models import EnrichmentResult

__all__ = [
    "DEFAULT_MODEL",
    "ENRICH_COMPANY_TOOL",
    "ExtractionClient",
    "LINK_INVENTORY_LIMIT",
    "SYSTEM_PROMPT",
    "TOOL_NAME",
    "build_messages",
]

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "google/gemini-3-flash-preview"
LINK_INVENTORY_LIMIT = 30
TOOL_NAME = "enrich_company"

SYSTEM_PROMPT = (
    "You are an expert VC analyst. Analyze the provided website content and extract structured "
    "intelligence about the company. Be concise and insightful. Focus on what matters for venture "
    "capital due diligence."
)

ENRICH_COMPANY_TOOL: dict[str, Any] = {
    "type": "function",
    "function": {
        "name": TOOL_NAME,
        "description": "Return structured company intelligence extracted from website content.",
        "parameters": {
            "type": "object",
            "properties": {
                "summary": {
                    "type": "string",
                    "description": (
                        "2-3 sentence summary of what the company does, their value proposition, "
                        "and target market."
                    ),
                },
                "what_they_do": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "3-6 bullet points describing key products, services, or capabilities.",
                },
                "keywords": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "5-10 relevant keywords/tags for this company (industry, tech, market).",
                },
                "signals": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "signal": {
                                "type": "string",
                                "description": "Signal name (e.g. 'Blog exists', 'Careers page', 'Pricing page')",
                            },
                            "detected": {"type": "boolean"},
                            "details": {"type": "string", "description": "Brief detail about this signal"},
                        },
                        "required": ["signal", "detected"],
                        "additionalProperties": False,
                    },
                    "description": (
                        "Signals detected: blog, careers page, pricing page, documentation, social media "
                        "links, customer logos, testimonials, press mentions, API docs, open source presence."
                    ),
                },
                "sources": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Key URLs found on the site (blog, careers, pricing, docs, etc.)",
                },
            },
            "required": ["summary", "what_they_do", "keywords", "signals", "sources"],
            "additionalProperties": False,
        },
    },
}


def build_messages(
    corpus: str,
    link_inventory: Sequence[str],
    source_url: str,
    link_limit: int = LINK_INVENTORY_LIMIT,
) -> list[dict[str, str]]:
    """Return the chat messages for one extraction request."""

    links = "\n".join(list(link_inventory)[:link_limit])
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": (
                "Analyze this company website content (main page + key subpages) and extract "
                f"structured data.\n\nWebsite: {source_url}\n\nContent:\n{corpus}\n\n"
                f"Links found on the site:\n{links}"
            ),
        },
    ]


class ExtractionClient:
    """Forced function-call extraction against an OpenAI-compatible gateway."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str | None = None,
        model: str = DEFAULT_MODEL,
        link_limit: int = LINK_INVENTORY_LIMIT,
        timeout: float = 60.0,
        client: OpenAI | None = None,
    ) -> None:
        if client is None:
            client = OpenAI(api_key=api_key, base_url=base_url, max_retries=0, timeout=timeout)
        self._client = client
        self.model = model
        self.link_limit = link_limit

    def extract(
        self, corpus: str, link_inventory: Sequence[str], source_url: str
    ) -> EnrichmentResult:
        messages = build_messages(corpus, link_inventory, source_url, self.link_limit)

        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                tools=[ENRICH_COMPANY_TOOL],
                tool_choice={"type": "function", "function": {"name": TOOL_NAME}},
            )
        except openai.APIStatusError as exc:
            if exc.status_code == 429:
                raise RateLimited() from exc
            if exc.status_code == 402:
                raise QuotaExhausted() from exc
            logger.error("AI gateway error: %s %s", exc.status_code, exc.message)
            raise ExtractionFailure(exc.status_code) from exc
        except openai.APIConnectionError as exc:
            logger.error("AI gateway unreachable: %s", exc)
            raise TransportFailure(f"Failed to reach extraction service: {exc}") from exc

        arguments = self._tool_arguments(response)
        if arguments is None:
            logger.error("No tool call in AI response: %r", response)
            raise SchemaViolation()

        try:
            return EnrichmentResult.model_validate_json(arguments)
        except ValidationError as exc:
            logger.error("AI tool arguments did not match the schema: %s", exc)
            raise SchemaViolation() from exc

    @staticmethod
    def _tool_arguments(response: Any) -> str | None:
        choices: List[Any] = getattr(response, "choices", None) or []
        if not choices:
            return None

        message = getattr(choices[0], "message", None)
        tool_calls = getattr(message, "tool_calls", None) or []
        if not tool_calls:
            return None

        function = getattr(tool_calls[0], "function", None)
        if function is None or getattr(function, "name", None) != TOOL_NAME:
            return None

        arguments = getattr(function, "arguments", None)
        if not isinstance(arguments, str) or not arguments:
            return None
        return arguments
