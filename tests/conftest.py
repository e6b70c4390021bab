"""Shared fakes for the scraping service and the OpenAI-compatible gateway."""

from __future__ import annotations

import json
import threading
from types import SimpleNamespace
from typing import Any, Callable, Dict, List

import httpx
import openai
import pytest
import requests

SCRAPE_ENDPOINT = "https://scrape.test/v1/scrape"


class DummyResponse:
    def __init__(self, payload: Any = None, status_code: int = 200, text: str | None = None) -> None:
        self._payload = payload
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(payload)

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


def page_payload(markdown: str, links: List[str] | None = None) -> dict:
    data: Dict[str, Any] = {"markdown": markdown}
    if links is not None:
        data["links"] = links
    return {"success": True, "data": data}


class FakeScrapeSession:
    """Stands in for :class:`requests.Session`, answering by scraped URL."""

    def __init__(self, pages: Dict[str, Any] | None = None) -> None:
        self.headers: Dict[str, str] = {}
        self.pages = dict(pages or {})
        self.calls: List[dict] = []
        self._lock = threading.Lock()

    def post(
        self, endpoint: str, json: dict, timeout: Any, headers: Dict[str, str] | None = None  # noqa: A002
    ) -> DummyResponse:
        with self._lock:
            self.calls.append(
                {"endpoint": endpoint, "json": json, "timeout": timeout, "headers": dict(headers or {})}
            )
        outcome = self.pages.get(json["url"])
        if outcome is None:
            raise requests.ConnectionError(f"no route to {json['url']}")
        if isinstance(outcome, BaseException):
            raise outcome
        if callable(outcome):
            return outcome()
        return outcome

    @property
    def scraped_urls(self) -> List[str]:
        return [call["json"]["url"] for call in self.calls]


def tool_call_response(arguments: str, name: str = "enrich_company") -> SimpleNamespace:
    function = SimpleNamespace(name=name, arguments=arguments)
    message = SimpleNamespace(content=None, tool_calls=[SimpleNamespace(type="function", function=function)])
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def text_response(content: str) -> SimpleNamespace:
    message = SimpleNamespace(content=content, tool_calls=None)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def status_error(status: int) -> openai.APIStatusError:
    request = httpx.Request("POST", "https://gateway.test/v1/chat/completions")
    response = httpx.Response(status, request=request, json={"error": {"message": "upstream"}})
    error_cls = openai.RateLimitError if status == 429 else openai.APIStatusError
    return error_cls("upstream error", response=response, body=None)


def connection_error() -> openai.APIConnectionError:
    request = httpx.Request("POST", "https://gateway.test/v1/chat/completions")
    return openai.APIConnectionError(request=request)


class FakeOpenAI:
    """Minimal ``client.chat.completions.create`` double."""

    def __init__(self, outcome: Any) -> None:
        self.outcome = outcome
        self.calls: List[dict] = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if isinstance(self.outcome, BaseException):
            raise self.outcome
        return self.outcome


ENRICHMENT_PAYLOAD = {
    "summary": "Acme builds rockets for small satellite operators.",
    "what_they_do": ["Launch services", "Satellite integration", "Mission planning"],
    "keywords": ["space", "launch", "aerospace", "b2b", "hardware"],
    "signals": [
        {"signal": "Careers page", "detected": True, "details": "12 open roles"},
        {"signal": "Pricing page", "detected": False},
    ],
    "sources": ["https://acme.com/careers", "https://acme.com/about"],
}


@pytest.fixture
def enrichment_payload() -> dict:
    return json.loads(json.dumps(ENRICHMENT_PAYLOAD))


@pytest.fixture
def make_session() -> Callable[..., FakeScrapeSession]:
    return FakeScrapeSession


@pytest.fixture
def make_openai() -> Callable[[Any], FakeOpenAI]:
    return FakeOpenAI
