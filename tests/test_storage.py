"""Tests for key-value storage backends."""

from __future__ import annotations

from pathlib import Path

import pytest

from prdforge.config import Settings
from prdforge.storage import FileKeyValueStore, MemoryKeyValueStore, build_store


def test_file_store_basic_operations(tmp_path: Path) -> None:
    """It should set, get and remove values as files."""

    store = FileKeyValueStore(tmp_path)
    assert store.get("prd_versions") is None

    store.set("prd_versions", '[{"id": 1}]')
    assert store.get("prd_versions") == '[{"id": 1}]'
    assert (tmp_path / "prd_versions.json").exists()

    store.set("prd_versions", "[]")
    assert store.get("prd_versions") == "[]"

    store.remove("prd_versions")
    store.remove("prd_versions")
    assert store.get("prd_versions") is None


def test_file_store_leaves_no_temp_files(tmp_path: Path) -> None:
    """It should move writes into place without leftovers."""

    store = FileKeyValueStore(tmp_path)
    for i in range(3):
        store.set("k", str(i))
    assert sorted(p.name for p in tmp_path.iterdir()) == ["k.json"]


def test_file_store_rejects_path_like_keys(tmp_path: Path) -> None:
    """It should not allow keys that escape the root."""

    store = FileKeyValueStore(tmp_path)
    with pytest.raises(ValueError):
        store.set("../evil", "x")


def test_build_store_selects_backend(tmp_path: Path) -> None:
    """It should build the configured backend."""

    assert isinstance(build_store(Settings(storage_backend="memory")), MemoryKeyValueStore)
    file_store = build_store(Settings(storage_backend="file", storage_dir=tmp_path / "data"))
    assert isinstance(file_store, FileKeyValueStore)
    assert (tmp_path / "data").is_dir()


def test_settings_derive_storage_keys() -> None:
    """It should derive both logical keys from the prefix."""

    settings = Settings(storage_key_prefix="audityzer")
    assert settings.versions_key == "audityzer_prd_versions"
    assert settings.font_key == "audityzer_prd_font"
