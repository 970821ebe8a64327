from abc import ABC, abstractmethod
from typing import Any


class ConfigSource(ABC):
    """Where remote settings come from.

    Hides the transport and format of the configuration service. Sources
    return raw key/value pairs; validation and merging happen in
    ConfigProvider.
    """

    @abstractmethod
    async def fetch(self) -> dict[str, Any]:
        """Fetch the current configuration values.

        Raises:
            ConfigFetchError: If the values cannot be retrieved
        """

    async def close(self) -> None:
        """Release any open connections."""
