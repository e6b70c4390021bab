"""Venturescope package exposing configuration, API, and enrichment services."""

from __future__ import annotations

import os
from pathlib import Path
from typing import MutableMapping

DEFAULT_ENV_PATH = Path(__file__).resolve().parent.parent.parent / ".env"


def _load_local_env(
    env_path: Path | None = None, environ: MutableMapping[str, str] | None = None
) -> None:
    """Copy ``KEY=value`` lines from a ``.env`` file into ``environ``.

    Variables that are already set are left alone, so the real environment
    always wins over the file. ``export`` prefixes and surrounding quotes are
    stripped.
    """

    path = DEFAULT_ENV_PATH if env_path is None else env_path
    target = os.environ if environ is None else environ
    if not path.exists():
        return

    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        if not key or key in target:
            continue

        target[key] = value.strip().strip('"').strip("'")


_load_local_env()

from .config import EnrichmentSettings  # noqa: E402,F401
from .errors import EnrichmentError  # noqa: E402,F401
from .models import EnrichmentResult, Signal  # noqa: E402,F401

__all__ = ["EnrichmentError", "EnrichmentResult", "EnrichmentSettings", "Signal"]
