"""End-to-end enrichment: website string in, :class:`EnrichmentResult` out."""

from __future__ import annotations

import logging

from venturescope.config import EnrichmentSettings
from venturescope.errors import InvalidInput
from venturescope.models import EnrichmentResult
from venturescope.services.corpus import CorpusAssembler
from venturescope.services.crawler import (
    MAX_SUBPAGES,
    PageFetcher,
    normalize_website,
    select_subpages,
)
from venturescope.services.extractor import ExtractionClient

__all__ = ["EnrichmentPipeline"]

logger = logging.getLogger(__name__)


class EnrichmentPipeline:
    """Sequence normalisation, scraping, corpus assembly and extraction.

    The pipeline holds no per-request state, so one instance can serve
    concurrent requests. Failures propagate as
    :class:`~venturescope.errors.EnrichmentError` subclasses and nothing is
    retried; subpage fetch failures are the only ones absorbed.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        extractor: ExtractionClient,
        *,
        assembler: CorpusAssembler | None = None,
        max_subpages: int = MAX_SUBPAGES,
    ) -> None:
        self._fetcher = fetcher
        self._extractor = extractor
        self._assembler = assembler or CorpusAssembler(fetcher)
        self.max_subpages = max_subpages

    @classmethod
    def from_settings(cls, settings: EnrichmentSettings) -> "EnrichmentPipeline":
        fetcher = PageFetcher(
            settings.scrape_api_key,
            endpoint=settings.scrape_endpoint,
            timeout=settings.timeout,
        )
        extractor = ExtractionClient(
            settings.extraction_api_key,
            base_url=settings.extraction_base_url,
            model=settings.model,
            link_limit=settings.link_inventory_limit,
            timeout=settings.read_timeout,
        )
        assembler = CorpusAssembler(
            fetcher,
            primary_char_limit=settings.primary_char_limit,
            subpage_char_limit=settings.subpage_char_limit,
        )
        return cls(fetcher, extractor, assembler=assembler, max_subpages=settings.max_subpages)

    def enrich(self, website: str | None) -> EnrichmentResult:
        if not website or not website.strip():
            raise InvalidInput()

        url = normalize_website(website)
        logger.info("Scraping: %s", url)
        primary = self._fetcher.fetch_page(url)

        candidates = select_subpages(url, primary.links, limit=self.max_subpages)
        corpus = self._assembler.assemble(primary, candidates)

        return self._extractor.extract(corpus, primary.links, url)
