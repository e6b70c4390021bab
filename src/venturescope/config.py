"""Configuration model and helpers for the enrichment pipeline."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, Field, ValidationError

from venturescope.errors import MissingConfiguration

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "EnrichmentSettings",
    "EXTRACTION_API_KEY_ENV",
    "SCRAPE_API_KEY_ENV",
]

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "data" / "enrichment.json"

SCRAPE_API_KEY_ENV = "FIRECRAWL_API_KEY"
EXTRACTION_API_KEY_ENV = "LOVABLE_API_KEY"

_ENV_OVERRIDES = {
    "VENTURESCOPE_MODEL": "model",
    "VENTURESCOPE_SCRAPE_ENDPOINT": "scrape_endpoint",
    "VENTURESCOPE_EXTRACTION_BASE_URL": "extraction_base_url",
}

_SECRET_FIELDS = {"scrape_api_key", "extraction_api_key"}


class EnrichmentSettings(BaseModel):
    """Credentials, endpoints and content budgets for one pipeline instance."""

    scrape_api_key: str = Field(..., min_length=1, description="Bearer token for the scraping service")
    extraction_api_key: str = Field(
        ..., min_length=1, description="Bearer token for the generative extraction service"
    )
    scrape_endpoint: str = Field(default="https://api.firecrawl.dev/v1/scrape")
    extraction_base_url: str = Field(default="https://ai.gateway.lovable.dev/v1")
    model: str = Field(default="google/gemini-3-flash-preview")
    max_subpages: int = Field(default=4, ge=0, description="Maximum number of subpages fetched per site")
    primary_char_limit: int = Field(
        default=6000, gt=0, description="Characters of primary page text kept in the corpus"
    )
    subpage_char_limit: int = Field(
        default=2000, gt=0, description="Characters of each subpage excerpt kept in the corpus"
    )
    link_inventory_limit: int = Field(
        default=30, ge=0, description="Number of discovered links passed to the extraction prompt"
    )
    connect_timeout: float = Field(default=10.0, gt=0)
    read_timeout: float = Field(default=60.0, gt=0)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        path: Path | str | None = None,
    ) -> "EnrichmentSettings":
        """Build settings from the process environment and an optional tuning file.

        Credentials are only ever read from the environment. Tuning values are
        read from ``path`` (or :data:`DEFAULT_CONFIG_PATH` when it exists).
        """

        env = os.environ if environ is None else environ

        values = cls._load_tuning(path)
        for variable, field in _ENV_OVERRIDES.items():
            value = env.get(variable, "").strip()
            if value:
                values[field] = value

        for variable, field in (
            (SCRAPE_API_KEY_ENV, "scrape_api_key"),
            (EXTRACTION_API_KEY_ENV, "extraction_api_key"),
        ):
            value = env.get(variable, "").strip()
            if not value:
                raise MissingConfiguration(f"{variable} is not configured")
            values[field] = value

        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            raise ValueError(f"Enrichment configuration is invalid\n{exc}") from exc

    @staticmethod
    def _load_tuning(path: Path | str | None) -> dict:
        if path is None:
            config_path = DEFAULT_CONFIG_PATH
            if not config_path.exists():
                return {}
        else:
            config_path = Path(path)

        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise FileNotFoundError(f"Configuration file not found: {config_path}") from exc
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in configuration file: {config_path}") from exc

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file is invalid: {config_path}")

        return {key: value for key, value in data.items() if key not in _SECRET_FIELDS}

    def dump(self, path: Path | str | None = None) -> None:
        """Persist the tuning values (without credentials) to disk as JSON."""

        config_path = Path(path) if path else DEFAULT_CONFIG_PATH
        config_path.parent.mkdir(parents=True, exist_ok=True)
        payload = self.model_dump(exclude=_SECRET_FIELDS)
        config_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    @property
    def timeout(self) -> tuple[float, float]:
        return (self.connect_timeout, self.read_timeout)
