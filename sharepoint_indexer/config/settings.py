"""Application settings loaded from environment variables via pydantic-settings.

Two sources, in priority order:

1. **Environment variables** (e.g. ``AZURE_SEARCH_API_KEY=...``), always win.
2. **.env file** in the working directory, for local development.

Field ``azure_search_api_key`` maps to env var ``AZURE_SEARCH_API_KEY``.
Empty strings mean "not configured"; the component factory in ``pipeline/factory.py``
checks them and raises :class:`ConfigurationError` when a selected backend is
missing a value.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """SharePoint indexer settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Microsoft Graph (document source) ===
    graph_tenant_id: str = ""
    graph_client_id: str = ""
    graph_client_secret: str = ""
    graph_base_url: str = "https://graph.microsoft.com/v1.0"
    graph_authority_url: str = "https://login.microsoftonline.com"
    graph_drive_name: str = "Documents"
    graph_timeout_seconds: float = 60.0

    # === Embeddings ===
    # An Azure endpoint selects AsyncAzureOpenAI; otherwise the public
    # OpenAI API (or an OpenAI-compatible base URL) is used.
    azure_openai_endpoint: str = ""
    azure_openai_api_key: str = ""
    azure_openai_api_version: str = "2024-02-01"
    azure_openai_embedding_deployment: str = "text-embedding-3-small"
    openai_api_key: str = ""
    openai_base_url: str = ""
    embedding_dimension: int = 0  # 0 = accept whatever the first vector reports
    embedding_max_retries: int = 3
    embedding_base_delay: float = 1.0

    # === Search index ===
    search_backend: str = "azure"  # "azure" | "chromadb"
    azure_search_endpoint: str = ""
    azure_search_api_key: str = ""
    azure_search_api_version: str = "2023-11-01"
    search_index_name: str = "sharepoint-documents"
    chromadb_persist_dir: str = "./data/chromadb"

    # === Pipeline ===
    default_sharepoint_file_path: str = ""
    max_chunk_size: int = 2000

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    def uses_azure_openai(self) -> bool:
        """Return ``True`` when embeddings should go to an Azure OpenAI resource."""
        return bool(self.azure_openai_endpoint)
