"""Document acquisition (internal).

A document reference is literal XML text, a filesystem path, or an http(s)
URL. This module turns a reference into text and derives the base path that
relative schemaLocation attributes are resolved against.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urljoin

import httpx

from wsdldoc.codes import SourceKind
from wsdldoc.contracts import AcquisitionOptions
from wsdldoc.errors import AcquisitionError

logger = logging.getLogger(__name__)

DocumentRef = Union[str, bytes, os.PathLike]

_URL_SCHEMES = ("http:", "https:")


def classify(document: DocumentRef) -> SourceKind:
    """Decide how a document reference is acquired."""
    if isinstance(document, bytes):
        return SourceKind.LITERAL
    if isinstance(document, os.PathLike):
        return SourceKind.PATH
    if document.startswith(_URL_SCHEMES):
        return SourceKind.URL
    if document.lstrip().startswith("<"):
        return SourceKind.LITERAL
    return SourceKind.PATH


def determine_base_path(document: Optional[DocumentRef]) -> Optional[str]:
    """Base for relative schema locations: the URL itself, an absolute path, or None for literal text."""
    if document is None:
        return None

    kind = classify(document)
    if kind is SourceKind.URL:
        return str(document)
    if kind is SourceKind.PATH:
        return str(Path(os.fspath(document)).expanduser().resolve())
    return None


def resolve_location(location: str, base_path: str) -> str:
    """Resolve a schemaLocation against a base path or base URL."""
    if location.startswith(_URL_SCHEMES):
        return location
    if base_path.startswith(_URL_SCHEMES):
        return urljoin(base_path, location)

    candidate = Path(location)
    if candidate.is_absolute():
        return str(candidate)
    return str((Path(base_path).parent / candidate).resolve())


def read_document(
    document: DocumentRef,
    *,
    options: Optional[AcquisitionOptions] = None,
    client: Optional[httpx.Client] = None,
) -> str:
    """Return the raw text of a document reference.

    Raises:
        AcquisitionError: If the file cannot be read or the URL cannot be fetched
    """
    options = options or AcquisitionOptions()
    kind = classify(document)

    if kind is SourceKind.LITERAL:
        if isinstance(document, bytes):
            return document.decode("utf-8")
        return document  # type: ignore[return-value]

    if kind is SourceKind.URL:
        return fetch_url(str(document), options=options, client=client)

    path = Path(os.fspath(document)).expanduser()
    logger.debug("Reading document from %s", path)
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise AcquisitionError(f"Cannot read document {path}: {e}") from e


def fetch_url(
    url: str,
    *,
    options: Optional[AcquisitionOptions] = None,
    client: Optional[httpx.Client] = None,
) -> str:
    """GET a document over HTTP. An injected client is used as-is and left open."""
    options = options or AcquisitionOptions()
    logger.debug("Fetching document from %s", url)

    owns_client = client is None
    if owns_client:
        client = httpx.Client(
            timeout=options.timeout,
            headers=options.headers,
            follow_redirects=options.follow_redirects,
        )
    try:
        response = client.get(url)
        response.raise_for_status()
        return response.text
    except httpx.HTTPError as e:
        raise AcquisitionError(f"Cannot fetch document {url}: {e}") from e
    finally:
        if owns_client:
            client.close()


def describe(document: Optional[DocumentRef]) -> str:
    """Short, log-friendly description of a document reference."""
    if document is None:
        return "<no document>"
    kind = classify(document)
    if kind is SourceKind.LITERAL:
        return f"<literal {len(document)} chars>"
    return str(os.fspath(document))
