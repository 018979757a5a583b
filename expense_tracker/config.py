from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

API_BASE_URL_ENV = "EXPENSE_TRACKER_API_BASE_URL"
ORIGIN_ENV = "EXPENSE_TRACKER_ORIGIN"
# last resort for local development; deployments set one of the variables above
FALLBACK_API_BASE_URL = "http://localhost:8000/api"

DEFAULT_CONFIG: Dict[str, object] = {
    "origin": None,
    "timeout": None,
    "download_dir": ".",
}


def _merge_defaults(current: Dict[str, object], defaults: Dict[str, object]) -> Dict[str, object]:
    """Merge missing default keys into the current config recursively."""
    merged = dict(current)
    for key, value in defaults.items():
        if key not in merged:
            merged[key] = value
        elif isinstance(value, dict) and isinstance(merged[key], dict):
            merged[key] = _merge_defaults(merged[key], value)
    return merged


def load_config(path: Path | str | None = None) -> Dict[str, object]:
    if path is None:
        return dict(DEFAULT_CONFIG)
    target = Path(path)
    if not target.exists():
        return dict(DEFAULT_CONFIG)
    with target.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    return _merge_defaults(data, DEFAULT_CONFIG)


def resolve_base_url(
    config: Optional[Mapping[str, object]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """Return the API base URL.

    Precedence, first non-empty wins:

    1. ``EXPENSE_TRACKER_API_BASE_URL``
    2. ``<origin>/api`` where origin is ``EXPENSE_TRACKER_ORIGIN`` or the
       config's ``origin`` key
    3. ``FALLBACK_API_BASE_URL``
    """
    environ = os.environ if environ is None else environ
    config = config or {}

    override = environ.get(API_BASE_URL_ENV)
    if override:
        return override.rstrip("/")

    origin = environ.get(ORIGIN_ENV) or config.get("origin")
    if origin:
        return f"{str(origin).rstrip('/')}/api"

    return FALLBACK_API_BASE_URL
