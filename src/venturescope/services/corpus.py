"""Assembly of the evidence corpus handed to the extraction stage."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Sequence

from venturescope.errors import UpstreamFetchFailure
from venturescope.models import ScrapeResult, SubpageCandidate
from venturescope.services.crawler import PageFetcher

__all__ = [
    "CorpusAssembler",
    "PRIMARY_CHAR_LIMIT",
    "SUBPAGE_CHAR_LIMIT",
    "format_excerpt",
]

logger = logging.getLogger(__name__)

PRIMARY_CHAR_LIMIT = 6000
SUBPAGE_CHAR_LIMIT = 2000


def format_excerpt(url: str, content: str, limit: int = SUBPAGE_CHAR_LIMIT) -> str:
    """Return ``content`` truncated to ``limit`` under a header naming ``url``."""

    return f"\n\n--- PAGE: {url} ---\n{content[:limit]}"


class CorpusAssembler:
    """Fetch subpages concurrently and join them with the primary page text.

    A subpage that cannot be fetched is logged and left out. Excerpts keep
    the order of the candidates regardless of which fetch finishes first.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        *,
        primary_char_limit: int = PRIMARY_CHAR_LIMIT,
        subpage_char_limit: int = SUBPAGE_CHAR_LIMIT,
    ) -> None:
        self._fetcher = fetcher
        self.primary_char_limit = primary_char_limit
        self.subpage_char_limit = subpage_char_limit

    def assemble(self, primary: ScrapeResult, candidates: Sequence[SubpageCandidate]) -> str:
        excerpts = self._fetch_excerpts(candidates)
        corpus = primary.content[: self.primary_char_limit] + "".join(excerpts)
        logger.info("Total scraped content: %d chars", len(corpus))
        return corpus

    def _fetch_excerpts(self, candidates: Sequence[SubpageCandidate]) -> List[str]:
        if not candidates:
            return []

        logger.info("Scraping subpages: %s", [candidate.url for candidate in candidates])

        with ThreadPoolExecutor(max_workers=len(candidates)) as executor:
            futures: List[Future[ScrapeResult]] = [
                executor.submit(
                    self._fetcher.fetch_page,
                    candidate.url,
                    include_links=False,
                    only_main_content=True,
                )
                for candidate in candidates
            ]

            excerpts: List[str] = []
            for candidate, future in zip(candidates, futures):
                try:
                    page = future.result()
                except UpstreamFetchFailure as exc:
                    logger.warning("Skipping subpage %s: %s", candidate.url, exc)
                    continue
                excerpts.append(format_excerpt(candidate.url, page.content, self.subpage_char_limit))

        return excerpts
