"""Embedding generation with bounded exponential backoff.

The only stage of the pipeline that recovers from failure.  Each call to the
embedding provider is retried up to ``max_retries`` times (so
``max_retries + 1`` attempts in total) when it raises or returns an empty
vector.  Waits double from ``base_delay``: 1 s, 2 s, 4 s with the defaults.

After the final attempt the provider's original exception propagates
unchanged, so callers see the real failure (rate limit, auth, timeout)
rather than a generic wrapper.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from sharepoint_indexer.interfaces.embedding_provider import IEmbeddingProvider
from sharepoint_indexer.utils.errors import EmbeddingError

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY = 1.0


class Embedder:
    """Turns chunk text into vectors through an :class:`IEmbeddingProvider`.

    Parameters
    ----------
    provider:
        The embedding service adapter.
    deployment:
        Model deployment (Azure) or model name passed on every call.
    max_retries:
        Retries after the first attempt (default 3).
    base_delay:
        Seconds to wait before the first retry; doubled for each later one.
    expected_dimension:
        When positive, every vector must have exactly this many components.
    sleep:
        Awaitable delay function, ``asyncio.sleep`` unless a test injects one.
    """

    def __init__(
        self,
        provider: IEmbeddingProvider,
        deployment: str,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay: float = DEFAULT_BASE_DELAY,
        expected_dimension: int = 0,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self._provider = provider
        self._deployment = deployment
        self._max_retries = max(0, max_retries)
        self._base_delay = base_delay
        self._expected_dimension = expected_dimension
        self._sleep = sleep

    async def embed(self, text: str) -> list[float]:
        """Return the embedding of *text*, retrying transient failures.

        Raises
        ------
        EmbeddingError
            If the final attempt returns no vector, or the vector has the
            wrong dimension.
        Exception
            Whatever the provider raised on the final attempt.
        """
        provider_name = self._provider.get_provider_name()

        for attempt in range(self._max_retries + 1):
            is_last = attempt == self._max_retries
            try:
                vector = await self._provider.compute_embedding(self._deployment, text)
            except Exception as exc:
                if is_last:
                    logger.error(
                        "embedding_failed",
                        provider=provider_name,
                        attempts=attempt + 1,
                        error=str(exc),
                    )
                    raise
                await self._back_off(attempt, reason=str(exc))
                continue

            if not vector:
                if is_last:
                    logger.error("embedding_empty", provider=provider_name, attempts=attempt + 1)
                    raise EmbeddingError(
                        message="No embedding returned",
                        provider_name=provider_name,
                    )
                await self._back_off(attempt, reason="empty embedding")
                continue

            vector = [float(value) for value in vector]
            self._check_dimension(vector, provider_name)
            return vector

        # Unreachable: the last iteration either returns or raises.
        raise EmbeddingError(provider_name=provider_name)

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed *texts* one at a time in order; the first failure propagates.

        All vectors of the batch must share one dimension.
        """
        vectors: list[list[float]] = []
        for text in texts:
            vector = await self.embed(text)
            if vectors and len(vector) != len(vectors[0]):
                raise EmbeddingError(
                    message=(
                        f"Embedding dimension changed within a batch: "
                        f"{len(vectors[0])} then {len(vector)}"
                    ),
                    provider_name=self._provider.get_provider_name(),
                )
            vectors.append(vector)
        return vectors

    async def _back_off(self, attempt: int, reason: str) -> None:
        delay = self._base_delay * (2**attempt)
        logger.warning(
            "embedding_retry",
            attempt=attempt + 1,
            max_attempts=self._max_retries + 1,
            delay_seconds=delay,
            reason=reason,
        )
        await self._sleep(delay)

    def _check_dimension(self, vector: list[float], provider_name: str) -> None:
        if self._expected_dimension > 0 and len(vector) != self._expected_dimension:
            raise EmbeddingError(
                message=(
                    f"Embedding has {len(vector)} dimensions, "
                    f"expected {self._expected_dimension}"
                ),
                provider_name=provider_name,
            )
