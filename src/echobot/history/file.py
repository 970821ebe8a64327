"""File-backed key-value store.

Each key is stored as a separate file in a directory. Writes go to a
temporary file first and are moved into place, so a crash never leaves
a half-written value behind.
"""

import asyncio
import re
from pathlib import Path

from .base import KeyValueStore

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class FileKeyValueStore(KeyValueStore):
    """Key-value store writing one file per key under ``directory``."""

    def __init__(self, path: str | Path = "./echobot_data", suffix: str = ".json"):
        self._directory = Path(path)
        self._suffix = suffix

    async def connect(self) -> None:
        """Create the data directory if needed."""
        await asyncio.to_thread(self._directory.mkdir, parents=True, exist_ok=True)

    async def disconnect(self) -> None:
        pass

    def _path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key) or key in (".", ".."):
            raise ValueError(f"Invalid store key: {key!r}")
        return self._directory / f"{key}{self._suffix}"

    async def get(self, key: str) -> str | None:
        path = self._path_for(key)

        def _read() -> str | None:
            if not path.exists():
                return None
            return path.read_text(encoding="utf-8")

        return await asyncio.to_thread(_read)

    async def put(self, key: str, value: str) -> None:
        path = self._path_for(key)

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_name(path.name + ".tmp")
            tmp_path.write_text(value, encoding="utf-8")
            tmp_path.replace(path)

        await asyncio.to_thread(_write)

    async def delete(self, key: str) -> None:
        path = self._path_for(key)
        await asyncio.to_thread(path.unlink, missing_ok=True)

    @property
    def backend_type(self) -> str:
        return "file"

    @property
    def directory(self) -> Path:
        return self._directory
