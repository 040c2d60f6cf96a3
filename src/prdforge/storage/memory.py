"""In-process key-value store."""

from __future__ import annotations

from prdforge.storage.protocol import KeyValueStore


class MemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:  # noqa: A003
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)
