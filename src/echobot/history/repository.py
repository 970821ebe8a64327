"""Conversation list persistence on top of a key-value store.

The whole list of conversations is stored as one JSON blob under a
fixed key.
"""

import json
import logging

from pydantic import ValidationError

from ..errors import HistoryDecodeError
from .base import KeyValueStore
from .models import Conversation

logger = logging.getLogger(__name__)

CONVERSATIONS_KEY = "conversations"


class ConversationRepository:
    """Loads and saves the full conversation list."""

    def __init__(self, store: KeyValueStore, key: str = CONVERSATIONS_KEY):
        self._store = store
        self._key = key

    @property
    def store(self) -> KeyValueStore:
        return self._store

    async def load_all(self) -> list[Conversation]:
        """Load every stored conversation.

        Returns:
            Conversations in stored order, or an empty list if nothing is stored

        Raises:
            HistoryDecodeError: If the stored blob is not a valid conversation list
        """
        blob = await self._store.get(self._key)
        if blob is None:
            return []

        try:
            items = json.loads(blob)
            if not isinstance(items, list):
                raise HistoryDecodeError(f"Expected a list under {self._key!r}")
            conversations = [Conversation.model_validate(item) for item in items]
        except (json.JSONDecodeError, ValidationError) as e:
            raise HistoryDecodeError(f"Stored conversations are corrupt: {e}") from e

        logger.debug("Loaded %d conversation(s) from %s store", len(conversations), self._store.backend_type)
        return conversations

    async def save_all(self, conversations: list[Conversation]) -> None:
        """Replace the stored list with ``conversations``."""
        blob = json.dumps([c.model_dump(mode="json") for c in conversations])
        await self._store.put(self._key, blob)
        logger.debug("Saved %d conversation(s)", len(conversations))
