"""Website normalisation, page fetching and subpage discovery."""

from __future__ import annotations

import logging
import re
from typing import List, Sequence
from urllib.parse import urljoin, urldefrag, urlparse

import requests

from venturescope.errors import ScrapeFailure, TransportFailure
from venturescope.models import ScrapeResult, SubpageCandidate

__all__ = [
    "MAX_SUBPAGES",
    "PageFetcher",
    "SUBPAGE_PATTERNS",
    "normalize_website",
    "select_subpages",
]

logger = logging.getLogger(__name__)

MAX_SUBPAGES = 4

# Matched against the URL path only, never the host.
SUBPAGE_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (r"about", r"pricing", r"careers|jobs", r"blog", r"product", r"team", r"docs")
)

DEFAULT_TIMEOUT = (10, 60)


def normalize_website(raw: str) -> str:
    """Return ``raw`` trimmed and prefixed with ``https://`` when it has no scheme."""

    url = raw.strip()
    if url.startswith("http://") or url.startswith("https://"):
        return url
    return f"https://{url}"


def _origin(url: str) -> tuple[str, str | None, int | None]:
    parsed = urlparse(url)
    # ``.port`` raises ValueError for malformed ports, which callers treat as unparsable.
    port = parsed.port
    if port is None:
        port = {"http": 80, "https": 443}.get(parsed.scheme)
    return (parsed.scheme.lower(), parsed.hostname, port)


def select_subpages(
    primary_url: str, links: Sequence[str], limit: int = MAX_SUBPAGES
) -> List[SubpageCandidate]:
    """Pick up to ``limit`` same-origin links whose path looks due-diligence relevant.

    Links are resolved against ``primary_url`` and kept in their original
    order. Links that fail to parse, point at another origin, or repeat an
    earlier candidate are skipped.
    """

    if limit <= 0:
        return []

    try:
        primary_origin = _origin(primary_url)
    except ValueError:
        return []

    candidates: List[SubpageCandidate] = []
    seen: set[str] = set()
    for link in links:
        if not isinstance(link, str) or not link.strip():
            continue
        try:
            resolved, _fragment = urldefrag(urljoin(primary_url, link.strip()))
            if _origin(resolved) != primary_origin:
                continue
            path = urlparse(resolved).path
        except ValueError:
            continue

        if not any(pattern.search(path) for pattern in SUBPAGE_PATTERNS):
            continue
        if resolved in seen:
            continue
        seen.add(resolved)

        candidates.append(SubpageCandidate(url=resolved))
        if len(candidates) >= limit:
            break

    return candidates


class PageFetcher:
    """Client for the page-scraping service.

    Each call to :meth:`fetch_page` issues exactly one POST and never retries.
    Without an injected ``session`` every call goes through :func:`requests.post`,
    so concurrent subpage fetches never share a connection pool.
    """

    def __init__(
        self,
        api_key: str,
        *,
        endpoint: str = "https://api.firecrawl.dev/v1/scrape",
        session: requests.Session | None = None,
        timeout: tuple[float, float] = DEFAULT_TIMEOUT,
    ) -> None:
        self._endpoint = endpoint
        self._timeout = timeout
        self._session = session
        self._headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}

    def fetch_page(
        self, url: str, *, include_links: bool = True, only_main_content: bool = False
    ) -> ScrapeResult:
        """Scrape ``url`` and return its markdown text and discovered links."""

        formats = ["markdown", "links"] if include_links else ["markdown"]
        body = {"url": url, "formats": formats, "onlyMainContent": only_main_content}

        try:
            post = self._session.post if self._session is not None else requests.post
            response = post(self._endpoint, json=body, headers=self._headers, timeout=self._timeout)
        except requests.RequestException as exc:
            logger.warning("Scrape request for %s failed: %s", url, exc)
            raise TransportFailure(f"Failed to scrape website: {exc}") from exc

        if not response.ok:
            logger.error(
                "Scraping service error for %s: %s %s", url, response.status_code, response.text[:500]
            )
            raise ScrapeFailure(response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("Scraping service returned invalid JSON for %s", url)
            raise ScrapeFailure(
                response.status_code, "Failed to scrape website (invalid response)"
            ) from exc

        return self._parse_payload(payload)

    @staticmethod
    def _parse_payload(payload: object) -> ScrapeResult:
        if not isinstance(payload, dict):
            return ScrapeResult()

        data = payload.get("data")
        if not isinstance(data, dict):
            data = {}

        content = data.get("markdown") or payload.get("markdown") or ""
        links = data.get("links") or payload.get("links") or []
        if not isinstance(content, str):
            content = ""
        if not isinstance(links, list):
            links = []

        return ScrapeResult(content=content, links=[str(link) for link in links if link])
