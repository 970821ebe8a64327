"""Abstract base class for remote document stores.

Hides how documents reach the remote database:
- Transport and authentication
- Document addressing (collection / id)
- Error translation into BackupError
"""

from abc import ABC, abstractmethod
from typing import Any


class DocumentStore(ABC):
    """Abstract document store keyed by collection and document id."""

    @abstractmethod
    async def exists(self, collection: str, doc_id: str) -> bool:
        """Check whether a document is present."""

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Fetch a document, or None if it does not exist."""

    @abstractmethod
    async def create(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        """Create a new document."""

    @abstractmethod
    async def update(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        """Overwrite an existing document."""

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document. Missing documents are ignored."""

    @abstractmethod
    async def list_ids(self, collection: str) -> list[str]:
        """List document ids in a collection."""

    @abstractmethod
    async def close(self) -> None:
        """Release any open connections."""
