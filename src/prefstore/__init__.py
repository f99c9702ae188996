"""prefstore - Persistent client preference store for analytics clients."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("prefstore")
except PackageNotFoundError:
    __version__ = "0+local"
from prefstore._constants import ALL_EVENTS, EU_ENDPOINT, STORAGE_KEY, US_ENDPOINT
from prefstore.config import StoreConfig
from prefstore.exceptions import (
    PrefStoreConfigError,
    PrefStoreError,
    SnapshotDecodeError,
    StorageError,
    UnknownFieldError,
)
from prefstore.models import (
    ActivityColumn,
    ActivityDisplayMode,
    AppIcon,
    FieldUpdate,
    PreferenceSnapshot,
    Theme,
    apply_update,
    default_snapshot,
    field_update,
)
from prefstore.storage import AsyncStorage, FileStorage, MemoryStorage
from prefstore.store import PreferenceStore

__all__ = [
    "__version__",
    "ALL_EVENTS",
    "ActivityColumn",
    "ActivityDisplayMode",
    "AppIcon",
    "AsyncStorage",
    "EU_ENDPOINT",
    "FieldUpdate",
    "FileStorage",
    "MemoryStorage",
    "PrefStoreConfigError",
    "PrefStoreError",
    "PreferenceSnapshot",
    "PreferenceStore",
    "STORAGE_KEY",
    "SnapshotDecodeError",
    "StorageError",
    "StoreConfig",
    "Theme",
    "US_ENDPOINT",
    "UnknownFieldError",
    "apply_update",
    "default_snapshot",
    "field_update",
]
