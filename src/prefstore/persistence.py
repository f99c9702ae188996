"""Snapshot persistence: record codec, merge-on-load and the background writer.

The persisted record is a JSON envelope ``{"state": {...}, "version": 0}``
whose ``state`` holds the camelCase field mapping of a snapshot.
``version`` is written for compatibility with existing clients and is not
interpreted.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from prefstore._constants import STORAGE_FORMAT_VERSION
from prefstore.exceptions import SnapshotDecodeError, UnknownFieldError
from prefstore.models.snapshot import PreferenceSnapshot, resolve_field_name
from prefstore.storage import AsyncStorage

_logger = logging.getLogger(__name__)


def encode_snapshot(snapshot: PreferenceSnapshot, *, version: int = STORAGE_FORMAT_VERSION) -> str:
    """Serialize *snapshot* into the persisted JSON envelope."""
    return json.dumps({"state": snapshot.to_storage_dict(), "version": version}, separators=(",", ":"))


def decode_record(raw: str) -> dict[str, Any]:
    """Parse a persisted envelope and return its ``state`` mapping.

    Raises :class:`SnapshotDecodeError` for invalid JSON or an envelope
    without an object-valued ``state``.
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as exc:
        raise SnapshotDecodeError(f"persisted record is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise SnapshotDecodeError(f"persisted record must be an object, got {type(data).__name__}")
    state = data.get("state")
    if not isinstance(state, dict):
        raise SnapshotDecodeError("persisted record has no 'state' object")
    return state


def merge_persisted(defaults: PreferenceSnapshot, persisted: Mapping[str, Any]) -> PreferenceSnapshot:
    """Overlay the persisted fields onto *defaults*, field by field.

    * fields missing from *persisted* keep their default,
    * keys that are not preference fields are ignored,
    * a persisted value that no longer fits its field's domain is dropped
      and the default kept.
    """
    values: dict[str, Any] = defaults.model_dump()
    ignored: list[str] = []
    for key, value in persisted.items():
        try:
            name = resolve_field_name(key)
        except UnknownFieldError:
            ignored.append(key)
            continue
        values[name] = value
    if ignored:
        _logger.debug("Ignoring unknown persisted fields: %s", ", ".join(sorted(ignored)))

    try:
        return PreferenceSnapshot.model_validate(values)
    except ValidationError as exc:
        rejected = _rejected_fields(exc)
        if not rejected:
            raise
        _logger.warning("Discarding invalid persisted fields: %s", ", ".join(sorted(rejected)))
        for name in rejected:
            values[name] = getattr(defaults, name)
        return PreferenceSnapshot.model_validate(values)


def _rejected_fields(exc: ValidationError) -> set[str]:
    rejected: set[str] = set()
    for error in exc.errors():
        loc = error.get("loc") or ()
        if not loc or not isinstance(loc[0], str):
            continue
        try:
            rejected.add(resolve_field_name(loc[0]))
        except UnknownFieldError:
            continue
    return rejected


class SnapshotWriter:
    """Serial, newest-wins writer for the persisted record.

    Requests only replace the pending payload; a single background task
    drains it, so at most one storage write is in flight and a burst of
    mutations collapses into the writes the storage can keep up with.
    Failed writes are logged and dropped.
    """

    def __init__(self, storage: AsyncStorage, key: str) -> None:
        self._storage = storage
        self._key = key
        self._pending: str | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def has_pending(self) -> bool:
        """Whether a payload is waiting to be handed to storage."""
        return self._pending is not None

    def request(self, payload: str) -> None:
        """Schedule *payload* to be written.  Never blocks, never raises."""
        self._pending = payload
        self._ensure_task()

    def _ensure_task(self) -> None:
        if self._pending is None:
            return
        if self._task is not None and not self._task.done():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            _logger.debug("No running event loop; write for key=%s deferred", self._key)
            return
        self._task = loop.create_task(self._drain())

    async def _drain(self) -> None:
        while self._pending is not None:
            payload = self._pending
            self._pending = None
            try:
                await self._storage.set_item(self._key, payload)
            except Exception:
                _logger.warning("Snapshot write failed for key=%s; dropping it", self._key, exc_info=True)
            else:
                _logger.debug("Snapshot persisted key=%s bytes=%d", self._key, len(payload))

    async def flush(self) -> None:
        """Wait until every requested payload has been handed to storage."""
        while True:
            self._ensure_task()
            task = self._task
            if task is None or task.done():
                return
            await asyncio.shield(task)
