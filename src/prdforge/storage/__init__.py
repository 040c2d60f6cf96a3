"""Key-value storage backends."""

from __future__ import annotations

from prdforge.config import Settings
from prdforge.storage.filesystem import FileKeyValueStore
from prdforge.storage.memory import MemoryKeyValueStore
from prdforge.storage.protocol import KeyValueStore


def build_store(settings: Settings) -> KeyValueStore:
    """Create the store selected by `settings.storage_backend`."""

    if settings.storage_backend == "memory":
        return MemoryKeyValueStore()
    if settings.storage_backend == "redis":
        from prdforge.storage.redis_store import RedisKeyValueStore

        return RedisKeyValueStore(redis_url=settings.redis_url, namespace=settings.storage_key_prefix)
    return FileKeyValueStore(settings.storage_dir)


__all__ = ["FileKeyValueStore", "KeyValueStore", "MemoryKeyValueStore", "build_store"]
