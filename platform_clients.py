"""
platform_clients.py
===================
HTTP clients for the remote store catalogs imported by GameStore:

* **Android** — top-100 list published as JSON
* **iOS**     — top-100 list published as JSON

Each catalog URL returns either a flat list of entries or a list of lists of
entries (one list per chart page).  The decode step tags the body as
:class:`FlatBody` or :class:`NestedBody` exactly once; :func:`flatten_body`
turns either into a plain entry list so downstream code never looks at the
shape again.

Entry format::

    {"name": "...", "publisher_id": "...", "store_id": "...",
     "bundle_id": "...", "version": "..."}

Every key is optional.

Configuration keys (``config.json``)
-------------------------------------
::

    "android_catalog_url": "https://.../android.top100.json",
    "ios_catalog_url": "https://.../ios.top100.json",
    "fetch_timeout": 10
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

import requests

logger = logging.getLogger('gamestore.catalog')


class CatalogFetchError(Exception):
    """A remote catalog could not be fetched or decoded."""

    def __init__(self, platform: str, message: str) -> None:
        super().__init__(f"{platform} catalog: {message}")
        self.platform = platform


# ---------------------------------------------------------------------------
# Raw entries and tagged bodies
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RawCatalogEntry:
    """One catalog entry as published remotely; every field is optional."""

    name: Optional[str] = None
    publisher_id: Optional[str] = None
    store_id: Optional[str] = None
    bundle_id: Optional[str] = None
    version: Optional[str] = None

    @classmethod
    def from_dict(cls, item: Any) -> 'RawCatalogEntry':
        """Build an entry from a decoded JSON item.

        Unknown keys are dropped; a non-object item yields an empty entry.
        """
        if not isinstance(item, dict):
            return cls()
        return cls(
            name=item.get('name'),
            publisher_id=item.get('publisher_id'),
            store_id=item.get('store_id'),
            bundle_id=item.get('bundle_id'),
            version=item.get('version'),
        )


@dataclass(frozen=True)
class FlatBody:
    """Catalog body that is a single list of entries."""

    entries: List[RawCatalogEntry]


@dataclass(frozen=True)
class NestedBody:
    """Catalog body that is a list of entry lists."""

    pages: List[List[RawCatalogEntry]]


CatalogBody = Union[FlatBody, NestedBody]


def decode_catalog_body(payload: Any, platform: str = 'unknown') -> CatalogBody:
    """Tag a decoded JSON *payload* as :class:`FlatBody` or :class:`NestedBody`.

    The body is nested when its first element is itself a list.

    Raises:
        CatalogFetchError: If *payload* is not a JSON array.
    """
    if not isinstance(payload, list):
        raise CatalogFetchError(platform, f"expected a JSON array, got {type(payload).__name__}")
    if payload and isinstance(payload[0], list):
        pages = []
        for page in payload:
            items = page if isinstance(page, list) else [page]
            pages.append([RawCatalogEntry.from_dict(item) for item in items])
        return NestedBody(pages)
    return FlatBody([RawCatalogEntry.from_dict(item) for item in payload])


def flatten_body(body: CatalogBody) -> List[RawCatalogEntry]:
    """Return the entries of *body* in source order, flattened one level."""
    if isinstance(body, NestedBody):
        return [entry for page in body.pages for entry in page]
    return list(body.entries)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class CatalogSourceClient:
    """Client for one remote catalog URL tagged with its platform."""

    def __init__(self, url: str, platform: str, timeout: float = 10):
        self.url = url
        self.platform = platform
        self.timeout = timeout
        self.session = requests.Session()
        self._log = logging.getLogger(f'gamestore.catalog.{platform}')

    def fetch(self) -> CatalogBody:
        """GET the catalog and return its tagged body.

        Raises:
            CatalogFetchError: On a network error, a non-2xx status, or a
                body that is not a JSON array.
        """
        try:
            resp = self.session.get(self.url, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as e:
            self._log.warning("Catalog request failed (%s): %s", self.url, e)
            raise CatalogFetchError(self.platform, str(e)) from e
        except ValueError as e:
            self._log.warning("Catalog body is not valid JSON (%s): %s", self.url, e)
            raise CatalogFetchError(self.platform, f"invalid JSON body: {e}") from e

        body = decode_catalog_body(payload, self.platform)
        self._log.info("Fetched %s catalog (%s)", self.platform, type(body).__name__)
        return body

    def fetch_entries(self) -> List[RawCatalogEntry]:
        """Fetch the catalog and return its flattened entries."""
        return flatten_body(self.fetch())

    def close(self) -> None:
        """Release the session's pooled connections."""
        self.session.close()

    def __enter__(self) -> 'CatalogSourceClient':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def fetch_catalogs(clients: Sequence[CatalogSourceClient]) -> Dict[str, List[RawCatalogEntry]]:
    """Fetch every client's catalog concurrently.

    All fetches run to completion before the result is assembled; if any of
    them failed, the first failure (in client order) is raised and no
    entries are returned.

    Returns:
        ``{platform: [RawCatalogEntry, ...]}`` in the order of *clients*.

    Raises:
        CatalogFetchError: If any catalog could not be fetched.
    """
    if not clients:
        return {}
    with ThreadPoolExecutor(max_workers=len(clients),
                            thread_name_prefix='gamestore_fetch') as executor:
        futures = [executor.submit(client.fetch_entries) for client in clients]
        errors = [future.exception() for future in futures]

    for client, error in zip(clients, errors):
        if isinstance(error, CatalogFetchError):
            raise error
        if error is not None:
            raise CatalogFetchError(client.platform, str(error)) from error

    return {client.platform: future.result()
            for client, future in zip(clients, futures)}
