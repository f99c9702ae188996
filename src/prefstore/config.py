"""Store configuration for prefstore."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from prefstore._constants import REVIEW_PROMPT_DELAY_MS, STORAGE_KEY
from prefstore.exceptions import PrefStoreConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class StoreConfig:
    """Preference store configuration.

    Parameters
    ----------
    storage_key : str
        Key of the single record holding the persisted snapshot.
    review_prompt_delay_ms : int
        Offset added to the current time to compute the default
        ``reviewPromptTime``.  Defaults to three days.
    persist : bool
        Write the snapshot to storage after every mutation.  Set to
        ``False`` for an ephemeral store that still restores on start.
    storage_dir : Path or None
        Directory used by :class:`prefstore.storage.FileStorage`.
        ``None`` selects the XDG data directory.
    """

    storage_key: str = STORAGE_KEY
    review_prompt_delay_ms: int = REVIEW_PROMPT_DELAY_MS
    persist: bool = True
    storage_dir: Path | None = None

    def __post_init__(self) -> None:
        if not self.storage_key.strip():
            raise PrefStoreConfigError("storage_key must be non-empty")
        if self.review_prompt_delay_ms < 0:
            raise PrefStoreConfigError(
                f"review_prompt_delay_ms must be >= 0, got {self.review_prompt_delay_ms}"
            )

    @classmethod
    def from_env(cls, **overrides: Any) -> StoreConfig:
        """Create configuration from environment variables.

        Reads ``PREFSTORE_STORAGE_KEY``, ``PREFSTORE_STORAGE_DIR``,
        ``PREFSTORE_PERSIST`` and ``PREFSTORE_REVIEW_PROMPT_DELAY_MS``.
        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        key_env = env.get("PREFSTORE_STORAGE_KEY")
        if key_env is not None:
            config_kwargs["storage_key"] = key_env

        dir_env = env.get("PREFSTORE_STORAGE_DIR")
        if dir_env:
            config_kwargs["storage_dir"] = Path(dir_env).expanduser()

        if "persist" not in overrides:
            config_kwargs["persist"] = _env_bool(env.get("PREFSTORE_PERSIST"), True)

        delay_env = env.get("PREFSTORE_REVIEW_PROMPT_DELAY_MS")
        if delay_env is not None and "review_prompt_delay_ms" not in overrides:
            try:
                config_kwargs["review_prompt_delay_ms"] = int(delay_env)
            except ValueError as exc:
                raise PrefStoreConfigError(
                    f"PREFSTORE_REVIEW_PROMPT_DELAY_MS must be an integer, got {delay_env!r}"
                ) from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
