"""YAML configuration loader with environment variable overrides.

Configuration is layered (later layers override earlier):

  1. config/config.yaml  -- static defaults checked into the deployment
  2. .env file           -- local developer overrides (not committed)
  3. Environment vars    -- set by the host at deploy time

:func:`load_config` reads the YAML file first, then deep-merges the values
from :class:`Settings` on top.  Only values the environment actually set
override YAML; Settings defaults merely fill keys the YAML file lacks.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from sharepoint_indexer.config.settings import Settings


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict[str, Any]:
    """Load YAML config and merge with environment-based Settings.

    Keys are upper-case setting names (``SEARCH_INDEX_NAME``), the same
    names the settings provider is queried with.

    Args:
        path: Path to the YAML configuration file.
        settings: Pre-built settings; a fresh :class:`Settings` is read when omitted.

    Returns:
        Flat mapping of setting name to value.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    resolved: dict[str, Any] = {}
    _flatten(yaml_config, resolved)

    settings = settings or Settings()
    explicitly_set = settings.model_fields_set
    for name, value in settings.model_dump().items():
        key = name.upper()
        # Defaults only fill gaps; values read from env / .env always win.
        if name in explicitly_set or key not in resolved:
            resolved[key] = value
    return resolved


def _flatten(node: dict[str, Any], out: dict[str, Any], prefix: str = "") -> None:
    """Flatten nested YAML sections into ``SECTION_KEY`` upper-case names."""
    for key, value in node.items():
        name = f"{prefix}_{key}" if prefix else str(key)
        if isinstance(value, dict):
            _flatten(value, out, name)
        else:
            out[name.upper()] = value
