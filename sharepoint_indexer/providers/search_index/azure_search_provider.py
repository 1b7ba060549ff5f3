"""Azure AI Search provider adapter (REST API over httpx).

Talks to the documents endpoints of one index:

    POST {endpoint}/indexes/{index}/docs/search   filter + select=docId, paged
    POST {endpoint}/indexes/{index}/docs/index    @search.action delete / upload

An indexing call answers 200 when every action succeeded and 207 when some
did not; the per-document ``status`` flags are mapped onto
:class:`IndexingOutcome` so the synchronizer can report partial failures.
Uses an injected ``httpx.AsyncClient`` so tests can use ``httpx.MockTransport``.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from sharepoint_indexer.interfaces.search_index_provider import ISearchIndexProvider
from sharepoint_indexer.models.index import INDEX_KEY_FIELD, IndexDocument, IndexingOutcome
from sharepoint_indexer.utils.errors import ProviderUnavailableError

logger = structlog.get_logger(logger_name=__name__)

# Service limits: 1000 actions per indexing request; page searches by 1000.
_MAX_BATCH = 1000
_PAGE_SIZE = 1000


class AzureSearchIndexProvider(ISearchIndexProvider):
    """Search index backed by an Azure AI Search index.

    Parameters
    ----------
    http_client:
        Injected ``httpx.AsyncClient``.
    endpoint:
        Service URL, e.g. ``https://my-search.search.windows.net``.
    api_key:
        Admin key (``api-key`` header).
    index_name:
        Target index.
    api_version:
        REST API version (default ``2023-11-01``).
    """

    _PROVIDER_NAME = "azure_search"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        endpoint: str,
        api_key: str,
        index_name: str,
        api_version: str = "2023-11-01",
    ) -> None:
        self._http = http_client
        self._docs_url = f"{endpoint.rstrip('/')}/indexes/{index_name}/docs"
        self._api_key = api_key
        self._index_name = index_name
        self._api_version = api_version

    # ------------------------------------------------------------------
    # ISearchIndexProvider implementation
    # ------------------------------------------------------------------

    async def query_ids(self, filter_expression: str) -> list[str]:
        ids: list[str] = []
        skip = 0
        while True:
            payload = await self._post(
                "search",
                {
                    "search": "*",
                    "filter": filter_expression,
                    "select": INDEX_KEY_FIELD,
                    "top": _PAGE_SIZE,
                    "skip": skip,
                },
            )
            page = [hit[INDEX_KEY_FIELD] for hit in payload.get("value", [])]
            ids.extend(page)
            if len(page) < _PAGE_SIZE:
                break
            skip += len(page)

        logger.debug("azure_search_ids_found", index=self._index_name, count=len(ids))
        return ids

    async def delete_by_ids(self, ids: list[str]) -> int:
        outcomes: list[IndexingOutcome] = []
        for start in range(0, len(ids), _MAX_BATCH):
            actions = [
                {"@search.action": "delete", INDEX_KEY_FIELD: key}
                for key in ids[start : start + _MAX_BATCH]
            ]
            outcomes.extend(await self._index(actions))

        failed = [outcome for outcome in outcomes if not outcome.succeeded]
        if failed:
            raise ProviderUnavailableError(
                message=f"Failed to delete {len(failed)} documents",
                provider_name=self._PROVIDER_NAME,
            )
        return len(outcomes)

    async def upsert(self, documents: list[IndexDocument]) -> list[IndexingOutcome]:
        outcomes: list[IndexingOutcome] = []
        for start in range(0, len(documents), _MAX_BATCH):
            actions = [
                {"@search.action": "upload", **document.to_index_record()}
                for document in documents[start : start + _MAX_BATCH]
            ]
            outcomes.extend(await self._index(actions))
        return outcomes

    def get_provider_name(self) -> str:
        return self._PROVIDER_NAME

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _index(self, actions: list[dict[str, Any]]) -> list[IndexingOutcome]:
        payload = await self._post("index", {"value": actions})
        outcomes = [self._to_outcome(item) for item in payload.get("value", [])]
        logger.info(
            "azure_search_batch_indexed",
            index=self._index_name,
            actions=len(actions),
            failed=sum(1 for outcome in outcomes if not outcome.succeeded),
        )
        return outcomes

    async def _post(self, operation: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self._http.post(
                f"{self._docs_url}/{operation}",
                params={"api-version": self._api_version},
                headers={"api-key": self._api_key, "Content-Type": "application/json"},
                json=body,
            )
        except httpx.HTTPError as exc:
            raise ProviderUnavailableError(
                message=f"Azure Search {operation} request failed: {exc}",
                provider_name=self._PROVIDER_NAME,
            ) from exc

        # 207 Multi-Status carries per-document results; only other non-2xx codes fail the call.
        if response.status_code >= 400:
            logger.warning(
                "azure_search_http_error",
                operation=operation,
                status=response.status_code,
            )
            raise ProviderUnavailableError(
                message=(
                    f"Azure Search {operation} returned {response.status_code}: "
                    f"{response.text[:300]}"
                ),
                provider_name=self._PROVIDER_NAME,
            )
        return response.json()

    @staticmethod
    def _to_outcome(item: dict[str, Any]) -> IndexingOutcome:
        return IndexingOutcome(
            key=str(item.get("key", "")),
            succeeded=bool(item.get("status", False)),
            status_code=item.get("statusCode"),
            error_message=item.get("errorMessage"),
        )
