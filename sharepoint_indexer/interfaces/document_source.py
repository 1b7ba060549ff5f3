"""Abstract base class for remote document sources.

A document source resolves SharePoint-style coordinates (tenant + site path
→ site, site → document library drive, drive + relative path → file) and
downloads the file.  The concrete adapter talks to Microsoft Graph; tests
inject in-memory fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from sharepoint_indexer.models.document import RawDocument


# Concrete implementation: GraphDocumentSource (sharepoint_indexer/providers/document_source/)
class IDocumentSource(ABC):
    """Contract for locating and downloading one remote file."""

    @abstractmethod
    async def resolve_site(self, tenant: str, site_path: str) -> str:
        """Return the site (container) identifier for *tenant* / *site_path*.

        Raises
        ------
        sharepoint_indexer.utils.errors.NotFoundError
            If the site does not exist or is not visible to the caller.
        """

    @abstractmethod
    async def resolve_drive(self, site_id: str) -> str:
        """Return the identifier of the site's document-library drive.

        Raises
        ------
        sharepoint_indexer.utils.errors.NotFoundError
            If the site has no matching document library.
        """

    @abstractmethod
    async def fetch_file(self, site_id: str, drive_id: str, relative_path: str) -> RawDocument:
        """Download the file at *relative_path* together with its metadata.

        Raises
        ------
        sharepoint_indexer.utils.errors.NotFoundError
            If the path does not resolve to a file.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"graph"``."""
