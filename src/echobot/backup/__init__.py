"""Remote backup of conversations to a document database."""

from .base import DocumentStore
from .factory import create_document_store
from .in_memory import InMemoryDocumentStore
from .service import ConversationBackup

__all__ = [
    "ConversationBackup",
    "DocumentStore",
    "InMemoryDocumentStore",
    "create_document_store",
]
