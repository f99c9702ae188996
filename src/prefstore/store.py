"""The preference store.

One :class:`PreferenceStore` per process holds the authoritative
snapshot.  The application's composition root constructs it and passes
it by reference; there is no module-level instance.
"""

from __future__ import annotations

import asyncio
import contextlib
import copy
import logging
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from prefstore.config import StoreConfig
from prefstore.exceptions import SnapshotDecodeError
from prefstore.models.snapshot import PreferenceSnapshot, default_snapshot, now_ms, resolve_field_name
from prefstore.models.updates import FieldUpdate, apply_update, field_update
from prefstore.persistence import SnapshotWriter, decode_record, encode_snapshot, merge_persisted
from prefstore.storage import AsyncStorage

_logger = logging.getLogger(__name__)

Listener = Callable[[PreferenceSnapshot], None]
_Replay = Callable[[PreferenceSnapshot], PreferenceSnapshot]


class PreferenceStore:
    """In-memory preference snapshot with best-effort persistence.

    Usage::

        async with PreferenceStore(FileStorage()) as store:
            unsubscribe = store.subscribe(render)
            store.set_field("theme", "dark")

    The store is usable as soon as it is constructed (on defaults), and
    construction starts loading the persisted record in the background.
    Without a running event loop the load starts on the first mutation or
    :meth:`flush` made inside one.  Awaiting :meth:`restore` waits for it.
    Mutations made before the load finishes are replayed on top of the
    restored snapshot, and nothing is written to storage until then, so
    the stored record is never clobbered by pre-restore defaults.
    """

    def __init__(
        self,
        storage: AsyncStorage,
        *,
        config: StoreConfig | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._storage = storage
        self._config = config or StoreConfig()
        self._clock = clock
        self._initial = self._defaults()
        self._snapshot = self._initial
        self._listeners: list[Listener] = []
        self._writer = SnapshotWriter(storage, self._config.storage_key)
        self._ready = False
        self._backlog: list[_Replay] = []
        self._restore_task: asyncio.Task[bool] | None = None
        self._closed = False
        self._start_restore()

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> PreferenceStore:
        await self.restore()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def ready(self) -> bool:
        """Whether the persisted snapshot has been restored (or found absent)."""
        return self._ready

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_snapshot(self) -> PreferenceSnapshot:
        """Return a copy of the current snapshot."""
        return self._snapshot.model_copy(deep=True)

    def get_field(self, field: str) -> Any:
        """Return a copy of one field's current value (snake_case or camelCase name)."""
        return copy.deepcopy(getattr(self._snapshot, resolve_field_name(field)))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with the new snapshot after every change.

        Returns a callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_field(self, field: str, value: Any) -> None:
        """Replace one field and schedule persistence.

        Raises :class:`prefstore.exceptions.UnknownFieldError` for unknown
        field names and :class:`pydantic.ValidationError` for values outside
        the field's domain; the snapshot is untouched in both cases.
        """
        self.apply(field_update(field, value))

    def apply(self, update: FieldUpdate) -> None:
        """Apply a typed single-field update."""
        self._commit(apply_update(self._snapshot, update), lambda snapshot: apply_update(snapshot, update))
        _logger.debug("Preference %s updated", update.field)

    def clear(self) -> None:
        """Reset every field to a freshly computed default."""
        self._commit(self._defaults(), lambda _snapshot: self._defaults())
        _logger.debug("Preferences reset to defaults")

    def _defaults(self) -> PreferenceSnapshot:
        return default_snapshot(self._clock(), review_prompt_delay_ms=self._config.review_prompt_delay_ms)

    def _commit(self, snapshot: PreferenceSnapshot, replay: _Replay) -> None:
        self._snapshot = snapshot
        if not self._ready:
            self._backlog.append(replay)
        self._notify()
        self._start_restore()
        self._request_write()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._snapshot.model_copy(deep=True))
            except Exception:
                _logger.debug("Preference listener failed", exc_info=True)

    def _request_write(self) -> None:
        if not self._config.persist or not self._ready:
            return
        if self._closed:
            _logger.debug("Store closed; change kept in memory only")
            return
        self._writer.request(encode_snapshot(self._snapshot))

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def restore(self) -> bool:
        """Load the persisted snapshot and merge it over the defaults.

        Returns ``True`` when a persisted snapshot was applied.  Missing or
        unreadable records leave the store on its current snapshot and
        return ``False``.  The load runs once; later calls return its result.
        """
        task = self._start_restore()
        assert task is not None  # noqa: S101
        return await asyncio.shield(task)

    def _start_restore(self) -> asyncio.Task[bool] | None:
        if self._restore_task is not None:
            return self._restore_task
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            _logger.debug("No running event loop; restore deferred")
            return None
        self._restore_task = loop.create_task(self._restore())
        return self._restore_task

    async def _restore(self) -> bool:
        persisted = await self._load()
        restored: PreferenceSnapshot | None = None
        if persisted is not None:
            try:
                restored = merge_persisted(self._initial, persisted)
            except ValidationError:
                _logger.warning("Persisted preferences unusable; keeping defaults", exc_info=True)

        backlog = self._backlog
        self._backlog = []
        self._ready = True

        if restored is None:
            if backlog:
                self._request_write()
            _logger.debug("No persisted preferences restored")
            return False

        for replay in backlog:
            restored = replay(restored)
        self._snapshot = restored
        _logger.debug("Preferences restored (replayed %d pending changes)", len(backlog))
        self._notify()
        if backlog:
            self._request_write()
        return True

    async def _load(self) -> dict[str, Any] | None:
        key = self._config.storage_key
        try:
            raw = await self._storage.get_item(key)
        except Exception:
            _logger.warning("Failed to load persisted preferences key=%s", key, exc_info=True)
            return None
        if raw is None:
            return None
        try:
            return decode_record(raw)
        except SnapshotDecodeError:
            _logger.warning("Corrupt persisted preferences key=%s", key, exc_info=True)
            return None

    async def flush(self) -> None:
        """Wait for the restore, then until every requested write has been handed to storage."""
        await self.restore()
        await self._writer.flush()

    async def purge(self) -> None:
        """Remove the persisted record.  The in-memory snapshot is kept."""
        await self.flush()
        await self._storage.remove_item(self._config.storage_key)
        _logger.debug("Persisted preferences removed key=%s", self._config.storage_key)

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        """Finish restoring, flush pending writes and stop persisting.

        Later mutations still update the in-memory snapshot and notify
        subscribers but are no longer written to storage.
        """
        if self._closed:
            return
        await self.flush()
        self._closed = True
        _logger.debug("Preference store closed")
