"""Convenience script for enriching one or more company websites locally."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import List

# Ensure the src directory is on the Python path so the venturescope package can be imported
SRC_PATH = Path(__file__).resolve().parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from venturescope.config import EnrichmentSettings  # noqa: E402  (import after path setup)
from venturescope.errors import MissingConfiguration, classify_exception  # noqa: E402
from venturescope.services.pipeline import EnrichmentPipeline  # noqa: E402


def enrich_all(pipeline: EnrichmentPipeline, websites: List[str]) -> List[dict]:
    """Enrich each website in turn, collecting a result or classified error per entry."""

    results = []
    for website in websites:
        logging.info("Enriching %s", website)
        try:
            result = pipeline.enrich(website)
        except Exception as exc:  # noqa: BLE001 - one failure must not stop the batch
            error = classify_exception(exc)
            logging.error("Failed to enrich %s: %s", website, error.message)
            results.append(
                {"website": website, "success": False, "error": error.message, "status": error.status_code}
            )
            continue
        results.append(
            {
                "website": website,
                "success": True,
                "data": result.model_dump(exclude_none=True),
                "status": 200,
            }
        )
    return results


def main(argv: List[str] | None = None) -> None:
    """Build the pipeline from the environment and enrich the websites given as arguments."""

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    websites = list(sys.argv[1:] if argv is None else argv)
    if not websites:
        logging.error("Usage: run_enrichment.py <website> [<website> ...]")
        sys.exit(2)

    try:
        settings = EnrichmentSettings.from_env()
    except (MissingConfiguration, FileNotFoundError, ValueError) as exc:
        logging.error("Could not load enrichment configuration: %s", exc)
        sys.exit(1)

    pipeline = EnrichmentPipeline.from_settings(settings)
    print(json.dumps(enrich_all(pipeline, websites), indent=2))


if __name__ == "__main__":
    main()
