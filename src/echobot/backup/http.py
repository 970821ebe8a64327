"""REST document store over httpx.

Documents live at ``{base_url}/{collection}/{doc_id}``:
- ``GET``    returns the document (404 when absent)
- ``POST``   creates it
- ``PUT``    replaces it
- ``DELETE`` removes it
- ``GET {base_url}/{collection}`` returns ``{"ids": [...]}``
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from ..errors import BackupError
from .base import DocumentStore

logger = logging.getLogger(__name__)


class HttpDocumentStore(DocumentStore):
    """Document store backed by a JSON REST API."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the store.

        Args:
            base_url: Root URL of the document API
            token: Optional Bearer token
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @staticmethod
    def _path(collection: str, doc_id: str | None = None) -> str:
        path = f"/{quote(collection, safe='')}"
        if doc_id is not None:
            path += f"/{quote(doc_id, safe='')}"
        return path

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise BackupError(f"{method} {path} failed: {e}") from e
        if response.status_code == 404 and method in ("GET", "DELETE"):
            return response
        if response.is_error:
            raise BackupError(f"{method} {path} returned HTTP {response.status_code}")
        return response

    async def exists(self, collection: str, doc_id: str) -> bool:
        response = await self._request("GET", self._path(collection, doc_id))
        return response.status_code != 404

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        response = await self._request("GET", self._path(collection, doc_id))
        if response.status_code == 404:
            return None
        return response.json()

    async def create(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        await self._request("POST", self._path(collection, doc_id), json=data)
        logger.debug("Created document %s/%s", collection, doc_id)

    async def update(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        await self._request("PUT", self._path(collection, doc_id), json=data)
        logger.debug("Updated document %s/%s", collection, doc_id)

    async def delete(self, collection: str, doc_id: str) -> None:
        await self._request("DELETE", self._path(collection, doc_id))

    async def list_ids(self, collection: str) -> list[str]:
        response = await self._request("GET", self._path(collection))
        if response.status_code == 404:
            return []
        return list(response.json().get("ids", []))

    async def close(self) -> None:
        await self._client.aclose()
