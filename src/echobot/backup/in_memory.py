"""In-memory document store for tests and offline use."""

import copy
from typing import Any

from ..errors import BackupError
from .base import DocumentStore


class InMemoryDocumentStore(DocumentStore):
    """Dict-of-dicts document store.

    ``create`` on an existing id and ``update`` on a missing id raise
    BackupError, matching a strict remote database.
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    async def exists(self, collection: str, doc_id: str) -> bool:
        return doc_id in self._collections.get(collection, {})

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        doc = self._collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def create(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        docs = self._collections.setdefault(collection, {})
        if doc_id in docs:
            raise BackupError(f"Document {collection}/{doc_id} already exists")
        docs[doc_id] = copy.deepcopy(data)

    async def update(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        docs = self._collections.get(collection, {})
        if doc_id not in docs:
            raise BackupError(f"Document {collection}/{doc_id} does not exist")
        docs[doc_id] = copy.deepcopy(data)

    async def delete(self, collection: str, doc_id: str) -> None:
        self._collections.get(collection, {}).pop(doc_id, None)

    async def list_ids(self, collection: str) -> list[str]:
        return list(self._collections.get(collection, {}))

    async def close(self) -> None:
        pass
