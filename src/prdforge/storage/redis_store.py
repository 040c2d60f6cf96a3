"""Redis-backed key-value store.

Optional; lets several API instances share one version log. Keys are namespaced but values are
stored exactly as given.
"""

from __future__ import annotations

from dataclasses import dataclass

import redis

from prdforge.errors import StorageError
from prdforge.storage.protocol import KeyValueStore


@dataclass
class RedisKeyValueStore(KeyValueStore):
    """Store values as plain Redis strings under `<namespace>:<key>`."""

    redis_url: str
    namespace: str = "prdforge"

    def __post_init__(self) -> None:
        self._client = redis.Redis.from_url(self.redis_url, decode_responses=True)

    def _key(self, key: str) -> str:
        return f"{self.namespace}:kv:{key}"

    def get(self, key: str) -> str | None:
        try:
            return self._client.get(self._key(key))
        except redis.RedisError as e:
            raise StorageError(f"Redis GET failed for {key}: {e}") from e

    def set(self, key: str, value: str) -> None:  # noqa: A003
        try:
            self._client.set(self._key(key), value)
        except redis.RedisError as e:
            raise StorageError(f"Redis SET failed for {key}: {e}") from e

    def remove(self, key: str) -> None:
        try:
            self._client.delete(self._key(key))
        except redis.RedisError as e:
            raise StorageError(f"Redis DEL failed for {key}: {e}") from e
