"""Chat session orchestration.

Ties the window builder, completion client, local history, remote backup,
remote settings and quota gate together for one user. Every collaborator is
passed in; nothing here reaches for global state.
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from ..backup.service import ConversationBackup
from ..entitlement.quota import QuotaGate
from ..errors import BackupError
from ..history.models import Conversation
from ..history.repository import ConversationRepository
from ..llm.base import CompletionClient
from ..llm.models import ChatMessage, CompletionErr, CompletionResult
from ..remote_config.provider import ConfigProvider
from ..window import select_window

logger = logging.getLogger(__name__)

FALLBACK_MESSAGES = {
    "empty_response": "Sorry, no response received from the API.",
    "request_failed": "Sorry, something went wrong.",
}
QUOTA_EXCEEDED_MESSAGE = "You have used all of your free messages. Subscribe to keep chatting."


class ChatSession:
    """Conversation list and send flow for one user."""

    def __init__(
        self,
        client: CompletionClient,
        repository: ConversationRepository,
        config: ConfigProvider,
        quota: QuotaGate,
        backup: ConversationBackup | None = None,
    ):
        self._client = client
        self._repository = repository
        self._config = config
        self._quota = quota
        self._backup = backup
        self._conversations: list[Conversation] = []
        self._current: Conversation | None = None
        self._pending_backups: set[asyncio.Task] = set()
        self._backup_lock = asyncio.Lock()
        self._send_lock = asyncio.Lock()

    @property
    def conversations(self) -> list[Conversation]:
        """Conversations, oldest first."""
        return list(self._conversations)

    @property
    def current(self) -> Conversation | None:
        return self._current

    async def start(self) -> None:
        """Load stored conversations and resume the most recent one."""
        self._conversations = [c for c in await self._repository.load_all() if not c.is_empty]
        self._current = self._conversations[-1] if self._conversations else None
        logger.info("Session started with %d conversation(s)", len(self._conversations))

    async def new_conversation(self) -> Conversation:
        """Start a new conversation, discarding the current one if it is empty."""
        await self.abandon()
        conversation = Conversation()
        self._conversations.append(conversation)
        self._current = conversation
        return conversation

    async def select(self, conversation_id: str) -> Conversation:
        """Switch to an existing conversation.

        Raises:
            KeyError: If no conversation has that id
        """
        conversation = self._find(conversation_id)
        if conversation is not self._current:
            await self.abandon()
        self._current = conversation
        return conversation

    async def delete_conversation(self, conversation_id: str) -> None:
        """Delete a conversation locally and from the remote backup.

        Raises:
            KeyError: If no conversation has that id
        """
        conversation = self._find(conversation_id)
        self._conversations.remove(conversation)
        if conversation is self._current:
            self._current = None
        await self._persist()
        if self._backup is not None:
            self._schedule(self._backup.remove(conversation_id))
        logger.info("Deleted conversation %s", conversation_id)

    async def abandon(self) -> bool:
        """Leave the current conversation, deleting it if it has no messages.

        Returns:
            True if an empty conversation was discarded
        """
        conversation = self._current
        if conversation is None or not conversation.is_empty:
            return False
        self._conversations.remove(conversation)
        self._current = None
        logger.debug("Discarded empty conversation %s", conversation.id)
        return True

    def preview_window(self, text: str) -> list[ChatMessage]:
        """Window that would be sent with ``text`` in the current conversation."""
        history = self._current.messages if self._current else []
        return select_window(history, text, self._config.get_budget(), self._config.get_sizer())

    async def send_message(self, text: str) -> CompletionResult:
        """Send ``text`` in the current conversation and record the reply.

        A failed completion is recorded as a fallback assistant message and
        also returned. When the free quota is used up nothing is recorded.
        Concurrent calls are handled one at a time.

        Raises:
            ValueError: If ``text`` is blank
        """
        if not text.strip():
            raise ValueError("Cannot send an empty message")

        async with self._send_lock:
            if not await self._quota.can_send():
                logger.info("Free message quota exhausted")
                return CompletionErr(reason="quota_exceeded", detail=QUOTA_EXCEEDED_MESSAGE)

            conversation = self._current or await self.new_conversation()
            settings = self._config.get_settings()

            # The window is captured before the request; history keeps changing while it is in flight.
            window = select_window(conversation.messages, text, settings.budget, self._config.get_sizer())
            conversation.append("user", text)
            logger.debug("Sending %d window message(s) to %s", len(window), settings.model)

            result = await self._client.complete(
                window,
                model=settings.model,
                temperature=settings.temperature,
            )

            if result.ok:
                conversation.append("assistant", result.content)
                await self._quota.record_send()
            else:
                conversation.append("assistant", FALLBACK_MESSAGES.get(result.reason, FALLBACK_MESSAGES["request_failed"]))

            if any(c is conversation for c in self._conversations):
                await self._persist()
                if self._backup is not None:
                    self._schedule(self._backup.backup(conversation.model_copy(deep=True)))
            return result

    async def restore_from_backup(self) -> int:
        """Add backed-up conversations missing locally.

        Returns:
            Number of conversations restored
        """
        if self._backup is None:
            return 0
        known = {c.id for c in self._conversations}
        restored = [c for c in await self._backup.restore() if c.id not in known and not c.is_empty]
        if restored:
            self._conversations = sorted(self._conversations + restored, key=lambda c: c.created_at)
            await self._persist()
        logger.info("Restored %d conversation(s) from backup", len(restored))
        return len(restored)

    async def flush(self) -> None:
        """Wait for scheduled backup work to finish."""
        while self._pending_backups:
            await asyncio.gather(*list(self._pending_backups))

    async def close(self) -> None:
        await self.flush()
        await self.abandon()

    def _find(self, conversation_id: str) -> Conversation:
        for conversation in self._conversations:
            if conversation.id == conversation_id:
                return conversation
        raise KeyError(f"Unknown conversation: {conversation_id}")

    async def _persist(self) -> None:
        await self._repository.save_all([c for c in self._conversations if not c.is_empty])

    def _schedule(self, operation: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(self._run_backup(operation))
        self._pending_backups.add(task)
        task.add_done_callback(self._pending_backups.discard)

    async def _run_backup(self, operation: Coroutine[Any, Any, None]) -> None:
        async with self._backup_lock:
            try:
                await operation
            except BackupError as e:
                logger.error("Remote backup failed: %s", e)
