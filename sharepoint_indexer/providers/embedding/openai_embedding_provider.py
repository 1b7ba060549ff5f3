"""OpenAI / Azure OpenAI embedding provider adapter.

Wraps the ``openai`` async clients to implement :class:`IEmbeddingProvider`.
When ``azure_openai_endpoint`` is configured the adapter talks to an Azure
OpenAI resource (``AsyncAzureOpenAI``) and the *deployment* argument names an
Azure deployment; otherwise it uses the public OpenAI API or an
OpenAI-compatible ``openai_base_url`` and *deployment* is a model name.

The SDK client is created lazily on first use, exactly once, under an
``asyncio.Lock``; concurrent pipeline runs then share the read-only handle.
SDK-level retries are disabled; the Embedder owns the retry policy.
"""

from __future__ import annotations

import asyncio
from typing import Any

import openai
import structlog

from sharepoint_indexer.config.settings import Settings
from sharepoint_indexer.interfaces.embedding_provider import IEmbeddingProvider
from sharepoint_indexer.utils.errors import ConfigurationError, EmbeddingError

logger = structlog.get_logger(logger_name=__name__)


class OpenAIEmbeddingProvider(IEmbeddingProvider):
    """Embedding provider backed by Azure OpenAI or an OpenAI-compatible API."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._use_azure = settings.uses_azure_openai()
        self._api_key = settings.azure_openai_api_key if self._use_azure else settings.openai_api_key
        self._provider_label = "azure_openai_embedding" if self._use_azure else "openai_embedding"
        self._client: openai.AsyncOpenAI | None = None
        self._client_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # IEmbeddingProvider implementation
    # ------------------------------------------------------------------

    async def compute_embedding(self, deployment: str, text: str) -> list[float] | None:
        client = await self._get_client()
        try:
            response = await client.embeddings.create(input=[text], model=deployment)
        except openai.APIError as exc:
            raise EmbeddingError(
                message=f"{self._provider_label} API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if not response.data:
            return None
        embedding = response.data[0].embedding
        logger.debug(
            "embedding_generated",
            provider=self._provider_label,
            deployment=deployment,
            text_length=len(text),
            dimension=len(embedding) if embedding else 0,
            tokens=response.usage.total_tokens if response.usage else None,
        )
        return embedding

    def get_provider_name(self) -> str:
        return self._provider_label

    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured."""
        return bool(self._api_key)

    # ------------------------------------------------------------------
    # Client lifecycle
    # ------------------------------------------------------------------

    async def _get_client(self) -> openai.AsyncOpenAI:
        if self._client is not None:
            return self._client
        async with self._client_lock:
            if self._client is None:
                self._client = self._create_client()
                logger.info(
                    "embedding_client_created",
                    provider=self._provider_label,
                    has_api_key=bool(self._api_key),
                )
        return self._client

    def _create_client(self) -> openai.AsyncOpenAI:
        if not self._api_key:
            raise ConfigurationError(
                message="Missing required OpenAI configuration: API key",
                provider_name=self._provider_label,
            )

        if self._use_azure:
            return openai.AsyncAzureOpenAI(
                azure_endpoint=self._settings.azure_openai_endpoint,
                api_key=self._api_key,
                api_version=self._settings.azure_openai_api_version,
                max_retries=0,
            )

        # Build client kwargs -- add base_url only when configured.
        client_kwargs: dict[str, Any] = {"api_key": self._api_key, "max_retries": 0}
        if self._settings.openai_base_url:
            client_kwargs["base_url"] = self._settings.openai_base_url
        return openai.AsyncOpenAI(**client_kwargs)
