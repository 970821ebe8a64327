"""Abstract base class for local key-value stores.

This module defines the interface for on-device persistence.
The abstraction hides:
- Storage format (files, SQLite, etc.)
- Persistence mechanism (disk, in-memory)
- Connection management

Values are opaque strings; callers decide how to serialize them.
"""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Abstract local key-value store."""

    @abstractmethod
    async def connect(self) -> None:
        """Initialize the store."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the store gracefully."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the value stored under ``key``, or None."""

    @abstractmethod
    async def put(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key``. Missing keys are ignored."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
