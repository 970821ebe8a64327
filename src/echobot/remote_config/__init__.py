"""Remote configuration: endpoint, model, key, budget and quota."""

from .base import ConfigSource
from .factory import create_config_source
from .models import RemoteSettings
from .provider import ConfigProvider
from .sources import HttpConfigSource, StaticConfigSource

__all__ = [
    "ConfigProvider",
    "ConfigSource",
    "HttpConfigSource",
    "RemoteSettings",
    "StaticConfigSource",
    "create_config_source",
]
