"""Service layer entry points for Venturescope."""

from __future__ import annotations

from .corpus import CorpusAssembler  # noqa: F401
from .crawler import PageFetcher, normalize_website, select_subpages  # noqa: F401
from .extractor import ExtractionClient  # noqa: F401
from .pipeline import EnrichmentPipeline  # noqa: F401

__all__ = [
    "CorpusAssembler",
    "EnrichmentPipeline",
    "ExtractionClient",
    "PageFetcher",
    "normalize_website",
    "select_subpages",
]
