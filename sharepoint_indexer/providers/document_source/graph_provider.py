"""Microsoft Graph document source for SharePoint document libraries.

Authenticates with the OAuth2 client-credentials flow against
``login.microsoftonline.com`` and walks the three Graph lookups the pipeline
needs:

    GET /sites/{tenant}.sharepoint.com:/sites/{site}    → site id
    GET /sites/{site_id}/drives                          → drive named "Documents"
    GET /sites/{site_id}/drives/{drive_id}/root:/{path}  → item + download URL

The file bytes are then fetched from the item's pre-authenticated
``@microsoft.graph.downloadUrl``.  Uses an injected ``httpx.AsyncClient``
so tests can swap in ``httpx.MockTransport``.
"""

from __future__ import annotations

import asyncio
import time
from pathlib import PurePosixPath
from typing import Any
from urllib.parse import quote

import httpx

from sharepoint_indexer.interfaces.document_source import IDocumentSource
from sharepoint_indexer.models.document import RawDocument, SourceMetadata
from sharepoint_indexer.utils.errors import NotFoundError, ProviderUnavailableError
from sharepoint_indexer.utils.logging import get_logger

_GRAPH_SCOPE = "https://graph.microsoft.com/.default"
_DOWNLOAD_URL_KEY = "@microsoft.graph.downloadUrl"
# Refresh the access token this many seconds before Graph says it expires.
_TOKEN_EXPIRY_MARGIN = 60.0


class GraphDocumentSource(IDocumentSource):
    """Resolve and download SharePoint files through Microsoft Graph.

    Parameters
    ----------
    http_client:
        Injected ``httpx.AsyncClient`` for testability and connection pooling.
    tenant_id, client_id, client_secret:
        Azure AD app registration used for the client-credentials grant.
    base_url:
        Graph API root, ``https://graph.microsoft.com/v1.0`` by default.
    authority_url:
        Token authority, ``https://login.microsoftonline.com`` by default.
    drive_name:
        Name of the document-library drive to use (default ``"Documents"``).
    """

    _PROVIDER_NAME = "graph"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        base_url: str = "https://graph.microsoft.com/v1.0",
        authority_url: str = "https://login.microsoftonline.com",
        drive_name: str = "Documents",
    ) -> None:
        self._http = http_client
        self._tenant_id = tenant_id
        self._client_id = client_id
        self._client_secret = client_secret
        self._base_url = base_url.rstrip("/")
        self._authority_url = authority_url.rstrip("/")
        self._drive_name = drive_name
        self._token: str | None = None
        self._token_expires_at = 0.0
        self._token_lock = asyncio.Lock()
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # IDocumentSource implementation
    # ------------------------------------------------------------------

    async def resolve_site(self, tenant: str, site_path: str) -> str:
        site = await self._get_json(
            f"/sites/{tenant}.sharepoint.com:/sites/{quote(site_path)}",
            what=f"site {tenant}/{site_path}",
        )
        self._logger.info("graph_site_resolved", site_id=site.get("id"), site_name=site.get("displayName"))
        return site["id"]

    async def resolve_drive(self, site_id: str) -> str:
        drives = await self._get_json(f"/sites/{site_id}/drives", what=f"drives of site {site_id}")
        for drive in drives.get("value", []):
            if drive.get("name") == self._drive_name:
                self._logger.info("graph_drive_resolved", drive_id=drive["id"], drive_name=self._drive_name)
                return drive["id"]
        raise NotFoundError(
            message=f"{self._drive_name} library not found in site {site_id}",
            provider_name=self._PROVIDER_NAME,
        )

    async def fetch_file(self, site_id: str, drive_id: str, relative_path: str) -> RawDocument:
        encoded_path = quote(relative_path.strip("/"), safe="/")
        item = await self._get_json(
            f"/sites/{site_id}/drives/{drive_id}/root:/{encoded_path}",
            what=f"file {relative_path}",
        )
        download_url = item.get(_DOWNLOAD_URL_KEY)
        if not download_url:
            raise NotFoundError(
                message=f"{relative_path} is not a downloadable file",
                provider_name=self._PROVIDER_NAME,
            )

        try:
            # The download URL is pre-authenticated; no bearer token.
            response = await self._http.get(download_url, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise ProviderUnavailableError(
                message=f"Download of {relative_path} failed: {exc}",
                provider_name=self._PROVIDER_NAME,
            ) from exc

        content = response.content
        metadata = self._to_metadata(item)
        if metadata.size and metadata.size != len(content):
            self._logger.warning(
                "graph_download_size_mismatch",
                expected=metadata.size,
                downloaded=len(content),
            )
        self._logger.info("graph_file_downloaded", file_name=metadata.name, size_bytes=len(content))
        return RawDocument(
            name=metadata.name,
            extension=PurePosixPath(metadata.name).suffix.lower(),
            content=content,
            size_bytes=len(content),
            metadata=metadata,
        )

    def get_provider_name(self) -> str:
        return self._PROVIDER_NAME

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _get_json(self, path: str, what: str) -> dict[str, Any]:
        """GET a Graph resource, mapping 404 to NotFoundError and other failures to ProviderUnavailableError."""
        token = await self._access_token()
        try:
            response = await self._http.get(
                f"{self._base_url}{path}",
                headers={"Authorization": f"Bearer {token}", "Accept": "application/json"},
            )
        except httpx.HTTPError as exc:
            raise ProviderUnavailableError(
                message=f"Graph request for {what} failed: {exc}",
                provider_name=self._PROVIDER_NAME,
            ) from exc

        if response.status_code == 404:
            raise NotFoundError(message=f"Graph could not find {what}", provider_name=self._PROVIDER_NAME)
        if response.status_code >= 400:
            self._logger.warning("graph_http_error", status=response.status_code, resource=what)
            raise ProviderUnavailableError(
                message=f"Graph returned {response.status_code} for {what}: {response.text[:300]}",
                provider_name=self._PROVIDER_NAME,
            )
        return response.json()

    async def _access_token(self) -> str:
        if self._token and time.monotonic() < self._token_expires_at:
            return self._token

        async with self._token_lock:
            if self._token and time.monotonic() < self._token_expires_at:
                return self._token

            token_url = f"{self._authority_url}/{self._tenant_id}/oauth2/v2.0/token"
            try:
                response = await self._http.post(
                    token_url,
                    data={
                        "grant_type": "client_credentials",
                        "client_id": self._client_id,
                        "client_secret": self._client_secret,
                        "scope": _GRAPH_SCOPE,
                    },
                )
                response.raise_for_status()
            except httpx.HTTPError as exc:
                raise ProviderUnavailableError(
                    message=f"Graph token request failed: {exc}",
                    provider_name=self._PROVIDER_NAME,
                ) from exc

            payload = response.json()
            self._token = payload["access_token"]
            expires_in = float(payload.get("expires_in", 3600))
            self._token_expires_at = time.monotonic() + max(0.0, expires_in - _TOKEN_EXPIRY_MARGIN)
            self._logger.debug("graph_token_acquired", expires_in=expires_in)
            return self._token

    @staticmethod
    def _to_metadata(item: dict[str, Any]) -> SourceMetadata:
        def _user(key: str) -> str | None:
            return ((item.get(key) or {}).get("user") or {}).get("displayName")

        return SourceMetadata(
            file_id=item["id"],
            name=item["name"],
            web_url=item.get("webUrl", ""),
            size=item.get("size", 0),
            created_at=item.get("createdDateTime"),
            modified_at=item.get("lastModifiedDateTime"),
            created_by=_user("createdBy"),
            modified_by=_user("lastModifiedBy"),
            mime_type=(item.get("file") or {}).get("mimeType"),
        )
