"""Mirrors conversations to a remote document store."""

import logging

from pydantic import ValidationError

from ..history.models import Conversation
from .base import DocumentStore

logger = logging.getLogger(__name__)


class ConversationBackup:
    """One document per conversation, keyed by conversation id."""

    def __init__(self, store: DocumentStore, collection: str = "conversations"):
        self._store = store
        self._collection = collection

    @property
    def collection(self) -> str:
        return self._collection

    async def backup(self, conversation: Conversation) -> None:
        """Upsert ``conversation``; create or update is chosen by a presence check."""
        data = conversation.model_dump(mode="json")
        if await self._store.exists(self._collection, conversation.id):
            await self._store.update(self._collection, conversation.id, data)
        else:
            await self._store.create(self._collection, conversation.id, data)
        logger.info("Backed up conversation %s (%d messages)", conversation.id, len(conversation.messages))

    async def remove(self, conversation_id: str) -> None:
        await self._store.delete(self._collection, conversation_id)
        logger.info("Removed backup of conversation %s", conversation_id)

    async def restore(self) -> list[Conversation]:
        """Fetch every backed-up conversation, oldest first.

        Documents that fail validation are skipped with a warning.
        """
        conversations = []
        for doc_id in await self._store.list_ids(self._collection):
            data = await self._store.get(self._collection, doc_id)
            if data is None:
                continue
            try:
                conversations.append(Conversation.model_validate(data))
            except ValidationError as e:
                logger.warning("Skipping invalid backup document %s: %s", doc_id, e)
        conversations.sort(key=lambda c: c.created_at)
        return conversations

    async def close(self) -> None:
        await self._store.close()
