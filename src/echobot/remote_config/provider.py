"""Holder for the active remote settings.

Replaces a process-wide config singleton: callers receive a
ConfigProvider explicitly and read settings through narrow accessors.
"""

import logging

from pydantic import ValidationError

from ..errors import ConfigFetchError
from ..window import SizeStrategy, create_sizer
from .base import ConfigSource
from .models import RemoteSettings

logger = logging.getLogger(__name__)


class ConfigProvider:
    """Keeps the last good settings and refreshes them from a source."""

    def __init__(self, source: ConfigSource, defaults: RemoteSettings | None = None):
        self._source = source
        self._defaults = defaults or RemoteSettings()
        self._settings = self._defaults

    async def refresh(self) -> bool:
        """Fetch values and apply them over the defaults.

        Fetch or validation failures keep the previous settings.

        Returns:
            True if new settings were applied
        """
        try:
            fetched = await self._source.fetch()
        except ConfigFetchError as e:
            logger.warning("Keeping previous settings: %s", e)
            return False

        merged = self._defaults.model_dump()
        merged.update({k: v for k, v in fetched.items() if v is not None})

        try:
            settings = RemoteSettings.model_validate(merged)
        except ValidationError as e:
            logger.warning("Keeping previous settings, remote values are invalid: %s", e)
            return False

        self._settings = settings
        logger.info(
            "Applied remote settings: model=%s budget=%d (%s) quota=%d",
            settings.model,
            settings.budget,
            settings.size_strategy,
            settings.free_message_quota,
        )
        return True

    def get_settings(self) -> RemoteSettings:
        return self._settings

    def get_budget(self) -> int:
        return self._settings.budget

    def get_sizer(self) -> SizeStrategy:
        return create_sizer(self._settings.size_strategy)

    def get_free_message_quota(self) -> int:
        return self._settings.free_message_quota

    async def close(self) -> None:
        await self._source.close()
