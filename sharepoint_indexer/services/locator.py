"""Decompose a SharePoint file URL into document-source coordinates.

A document URL such as::

    https://contoso.sharepoint.com/sites/Engineering/Shared%20Documents/specs/Q3%20Plan.docx

yields tenant ``contoso``, site path ``Engineering`` and relative file path
``specs/Q3 Plan.docx``.  Parsing is pure string work; nothing here touches
the network.
"""

from __future__ import annotations

from urllib.parse import unquote, urlsplit

import structlog

from sharepoint_indexer.models.document import DocumentReference
from sharepoint_indexer.utils.errors import MalformedReferenceError

logger = structlog.get_logger(logger_name=__name__)

_SITES_SEGMENT = "/sites/"
# The default document library, in the encoded form SharePoint emits and
# the raw form users paste.
_LIBRARY_SEGMENTS = ("/Shared%20Documents/", "/Shared Documents/")


def parse_reference(url: str) -> DocumentReference:
    """Parse *url* into a :class:`DocumentReference`.

    Parameters
    ----------
    url:
        Absolute SharePoint file URL.  A query string or fragment is ignored.

    Raises
    ------
    MalformedReferenceError
        If the URL is not absolute, has no ``/sites/<name>`` segment, has no
        document-library segment, or the decoded file path is empty.
    """
    if not url or not url.strip():
        raise MalformedReferenceError("Document URL is empty")

    url = url.strip()
    parts = urlsplit(url)
    if not parts.scheme or not parts.hostname:
        raise MalformedReferenceError(f"Document URL is not absolute: {url}")

    tenant = parts.hostname.split(".")[0]
    path = parts.path

    if _SITES_SEGMENT not in path:
        raise MalformedReferenceError(f"Document URL has no site path: {url}")
    site_path = path.split(_SITES_SEGMENT, 1)[1].split("/", 1)[0]
    if not site_path:
        raise MalformedReferenceError(f"Document URL has no site path: {url}")

    encoded_file_path = None
    for segment in _LIBRARY_SEGMENTS:
        if segment in path:
            encoded_file_path = path.split(segment, 1)[1]
            break
    if encoded_file_path is None:
        raise MalformedReferenceError(f"Document URL has no document library segment: {url}")

    try:
        relative_file_path = unquote(encoded_file_path, errors="strict")
    except UnicodeDecodeError as exc:
        raise MalformedReferenceError(f"Document URL file path is not valid UTF-8: {url}") from exc
    if not relative_file_path.strip("/"):
        raise MalformedReferenceError(f"Document URL has no file path: {url}")

    logger.debug(
        "reference_parsed",
        tenant=tenant,
        site_path=site_path,
        file_path=relative_file_path,
    )
    return DocumentReference(
        url=url,
        tenant=tenant,
        container_path=unquote(site_path),
        relative_file_path=relative_file_path,
    )
