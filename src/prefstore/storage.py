"""Asynchronous key-value storage collaborators.

The store only depends on the :class:`AsyncStorage` protocol.  Two
implementations are shipped: an in-memory one for tests and ephemeral
sessions, and a JSON-file one for desktop clients.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
from pathlib import Path
from typing import Protocol

from prefstore.config import StoreConfig
from prefstore.exceptions import StorageError

_logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class AsyncStorage(Protocol):
    """Structural storage interface consumed by the preference store.

    Having a protocol here makes it easy to plug in platform storage
    (keychain, browser storage, a remote KV service) or test doubles.
    """

    async def get_item(self, key: str) -> str | None:
        ...

    async def set_item(self, key: str, value: str) -> None:
        ...

    async def remove_item(self, key: str) -> None:
        ...


class MemoryStorage:
    """Dict-backed storage living for the lifetime of the object."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def peek(self, key: str) -> str | None:
        """Synchronous read, for inspection in tests and tooling."""
        return self._items.get(key)


def _xdg_data_home() -> Path:
    val = os.environ.get("XDG_DATA_HOME", "")
    if val and Path(val).is_absolute():
        return Path(val)
    return Path.home() / ".local" / "share"


def default_storage_dir() -> Path:
    """XDG data directory for prefstore records."""
    return _xdg_data_home() / "prefstore"


class FileStorage:
    """One JSON file per key inside *directory*.

    Blocking file I/O runs in the loop's default executor.  Writes go
    through a temporary sibling file and :func:`os.replace`, so a reader
    never sees a half-written record.
    """

    def __init__(self, directory: Path | str | None = None) -> None:
        self._directory = Path(directory) if directory is not None else default_storage_dir()

    @classmethod
    def from_config(cls, config: StoreConfig) -> FileStorage:
        return cls(config.storage_dir)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        """File backing *key*.  Characters unsafe in file names become ``_``.

        The mapping is not injective: keys that differ only in unsafe
        characters (``"a/b"`` and ``"a_b"``) share one file.  Use keys made
        of ``[A-Za-z0-9._-]`` to keep records apart.
        """
        safe = _UNSAFE_KEY_CHARS.sub("_", key)
        if not safe.strip("."):
            raise StorageError(f"unusable storage key {key!r}", key=key)
        return self._directory / f"{safe}.json"

    def _read(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(f"failed to read {path}: {exc}", key=key) from exc

    def _write(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp = path.with_suffix(".json.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(value, encoding="utf-8")
            os.replace(tmp, path)
        except OSError as exc:
            raise StorageError(f"failed to write {path}: {exc}", key=key) from exc
        _logger.debug("Wrote %d bytes to %s", len(value), path)

    def _remove(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"failed to remove {path}: {exc}", key=key) from exc

    async def get_item(self, key: str) -> str | None:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read, key)

    async def set_item(self, key: str, value: str) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._write, key, value)

    async def remove_item(self, key: str) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._remove, key)
