from __future__ import annotations

from pathlib import Path

import pytest

from prefstore.config import StoreConfig
from prefstore.exceptions import StorageError
from prefstore.storage import FileStorage, MemoryStorage, default_storage_dir


@pytest.mark.asyncio
async def test_memory_storage_get_set_remove() -> None:
    storage = MemoryStorage({"a": "1"})

    assert await storage.get_item("a") == "1"
    assert await storage.get_item("missing") is None

    await storage.set_item("b", "2")
    assert "b" in storage

    await storage.remove_item("a")
    await storage.remove_item("a")
    assert await storage.get_item("a") is None


@pytest.mark.asyncio
async def test_file_storage_round_trip(tmp_path: Path) -> None:
    storage = FileStorage(tmp_path / "prefs")

    assert await storage.get_item("client-storage") is None

    await storage.set_item("client-storage", '{"state": {}}')
    assert (tmp_path / "prefs" / "client-storage.json").read_text() == '{"state": {}}'
    assert await storage.get_item("client-storage") == '{"state": {}}'

    await storage.remove_item("client-storage")
    await storage.remove_item("client-storage")
    assert await storage.get_item("client-storage") is None


@pytest.mark.asyncio
async def test_file_storage_overwrites_without_leftovers(tmp_path: Path) -> None:
    storage = FileStorage(tmp_path)

    await storage.set_item("k", "first")
    await storage.set_item("k", "second")

    assert await storage.get_item("k") == "second"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["k.json"]


@pytest.mark.asyncio
async def test_file_storage_read_error_raises_storage_error(tmp_path: Path) -> None:
    storage = FileStorage(tmp_path)
    storage.path_for("k").mkdir()

    with pytest.raises(StorageError) as excinfo:
        await storage.get_item("k")
    assert excinfo.value.key == "k"


def test_file_storage_sanitizes_keys(tmp_path: Path) -> None:
    storage = FileStorage(tmp_path)
    assert storage.path_for("user/prefs:v1") == tmp_path / "user_prefs_v1.json"
    with pytest.raises(StorageError):
        storage.path_for("..")


def test_file_storage_directory_from_config(tmp_path: Path) -> None:
    assert FileStorage.from_config(StoreConfig(storage_dir=tmp_path)).directory == tmp_path


def test_default_storage_dir_follows_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
    assert default_storage_dir() == tmp_path / "prefstore"

    monkeypatch.setenv("XDG_DATA_HOME", "relative/path")
    assert default_storage_dir() == Path.home() / ".local" / "share" / "prefstore"


def test_file_storage_keys_differing_in_unsafe_chars_share_a_file(tmp_path: Path) -> None:
    storage = FileStorage(tmp_path)
    assert storage.path_for("a/b") == storage.path_for("a_b")
