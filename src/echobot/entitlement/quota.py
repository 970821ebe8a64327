"""Free-message quota gate.

Subscribers send without limit. Everyone else gets ``free_message_quota``
successful messages, counted on this device.
"""

import logging

from ..history.base import KeyValueStore
from ..remote_config.provider import ConfigProvider
from .base import EntitlementProvider

logger = logging.getLogger(__name__)

USAGE_KEY = "free_messages_used"


class QuotaGate:
    """Decides whether another message may be sent."""

    def __init__(
        self,
        config: ConfigProvider,
        entitlement: EntitlementProvider,
        store: KeyValueStore,
        key: str = USAGE_KEY,
    ):
        self._config = config
        self._entitlement = entitlement
        self._store = store
        self._key = key

    async def used(self) -> int:
        raw = await self._store.get(self._key)
        if raw is None:
            return 0
        try:
            return max(0, int(raw))
        except ValueError:
            logger.warning("Resetting unreadable quota counter %r", raw)
            return 0

    async def remaining(self) -> int | None:
        """Messages left before the paywall, or None for subscribers."""
        if self._entitlement.is_entitled():
            return None
        return max(0, self._config.get_free_message_quota() - await self.used())

    async def can_send(self) -> bool:
        if self._entitlement.is_entitled():
            return True
        return await self.used() < self._config.get_free_message_quota()

    async def record_send(self) -> None:
        """Count one message against the free quota (no-op for subscribers)."""
        if self._entitlement.is_entitled():
            return
        used = await self.used() + 1
        await self._store.put(self._key, str(used))
        logger.debug("Free messages used: %d/%d", used, self._config.get_free_message_quota())

    async def reset(self) -> None:
        await self._store.delete(self._key)
