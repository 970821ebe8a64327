"""Configuration sources: static values and an HTTP JSON endpoint."""

import logging
from typing import Any

import httpx

from ..errors import ConfigFetchError
from .base import ConfigSource

logger = logging.getLogger(__name__)


class StaticConfigSource(ConfigSource):
    """Returns a fixed set of values (environment, tests, offline mode)."""

    def __init__(self, values: dict[str, Any] | None = None):
        self._values = dict(values or {})

    async def fetch(self) -> dict[str, Any]:
        return dict(self._values)


class HttpConfigSource(ConfigSource):
    """Fetches a JSON object of settings with a GET request.

    The payload may be flat (``{"budget": 800}``) or wrap the values in a
    ``parameters`` object, as remote-config services commonly do.
    """

    def __init__(
        self,
        url: str,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._url = url
        self._client = httpx.AsyncClient(headers=headers, timeout=timeout, transport=transport)

    async def fetch(self) -> dict[str, Any]:
        try:
            response = await self._client.get(self._url)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ConfigFetchError(f"Could not fetch config from {self._url}: {e}") from e

        if not isinstance(payload, dict):
            raise ConfigFetchError(f"Config from {self._url} is not a JSON object")

        values = payload.get("parameters", payload)
        if not isinstance(values, dict):
            raise ConfigFetchError(f"Config 'parameters' from {self._url} is not a JSON object")
        logger.debug("Fetched %d config value(s) from %s", len(values), self._url)
        return values

    async def close(self) -> None:
        await self._client.aclose()
