"""Factory for creating remote document stores."""

from typing import Any

from .base import DocumentStore


def create_document_store(backend: str = "memory", **config: Any) -> DocumentStore:
    """Create a document store.

    Args:
        backend: Backend type ("memory" or "http")
        **config: Backend-specific configuration
            For http:
                - base_url: str (required)
                - token: str | None
                - timeout: float

    Returns:
        DocumentStore instance

    Raises:
        ValueError: If backend type is not supported
        TypeError: If required configuration is missing
    """
    if backend == "memory":
        from .in_memory import InMemoryDocumentStore
        return InMemoryDocumentStore()

    if backend == "http":
        if "base_url" not in config:
            raise TypeError("http document store requires 'base_url' in config")
        from .http import HttpDocumentStore
        return HttpDocumentStore(**config)

    raise ValueError(
        f"Unsupported document store backend: {backend}. "
        f"Supported backends: memory, http"
    )
