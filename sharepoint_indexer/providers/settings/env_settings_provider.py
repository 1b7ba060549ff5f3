"""Settings provider backed by the merged YAML + environment configuration.

Reads from the flat mapping produced by
:func:`~sharepoint_indexer.config.loader.load_config`, so a setting may come
from ``config/config.yaml``, a ``.env`` file, or the process environment.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from sharepoint_indexer.interfaces.settings_provider import ISettingsProvider
from sharepoint_indexer.utils.errors import ConfigurationError

logger = structlog.get_logger(logger_name=__name__)


class EnvSettingsProvider(ISettingsProvider):
    """Look up upper-case setting names in a resolved configuration mapping."""

    _PROVIDER_NAME = "env"

    def __init__(self, config: Mapping[str, Any]) -> None:
        self._config = dict(config)

    async def get_setting(self, name: str) -> str:
        value = self._lookup(name)
        if value == "":
            logger.warning("setting_missing", setting=name.upper())
            raise ConfigurationError(
                message=f"Missing required setting: {name.upper()}",
                provider_name=self._PROVIDER_NAME,
            )
        return value

    async def get_optional_setting(self, name: str, default: str = "") -> str:
        return self._lookup(name) or default

    def get_provider_name(self) -> str:
        return self._PROVIDER_NAME

    def _lookup(self, name: str) -> str:
        value = self._config.get(name.upper())
        if value is None:
            return ""
        return str(value).strip()
