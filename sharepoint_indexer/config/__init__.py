"""Configuration: pydantic-settings model and YAML loader."""

from sharepoint_indexer.config.loader import load_config
from sharepoint_indexer.config.settings import Settings

__all__ = ["Settings", "load_config"]
