from typing import Any

from .base import ConfigSource
from .sources import HttpConfigSource, StaticConfigSource


def create_config_source(kind: str = "static", **config: Any) -> ConfigSource:
    """Create a configuration source.

    Args:
        kind: Source type ('static' or 'http')
        **config: Source-specific configuration
            For static:
                - values: dict | None
            For http:
                - url: str (required)
                - token: str | None

    Returns:
        ConfigSource instance

    Raises:
        ValueError: If source type is not supported
        TypeError: If required configuration is missing
    """
    kind_lower = kind.lower()

    if kind_lower == "static":
        return StaticConfigSource(**config)

    if kind_lower == "http":
        if "url" not in config:
            raise TypeError("http config source requires 'url' in config")
        return HttpConfigSource(**config)

    raise ValueError(
        f"Unsupported config source: {kind}. "
        f"Supported sources: 'static', 'http'"
    )
