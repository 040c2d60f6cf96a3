"""Version store.

The authoritative, append-only log of saved drafts. Every mutation rewrites the full log as a
JSON array under a single storage key; there are no incremental writes.
"""

from __future__ import annotations

import json
import threading
from datetime import datetime
from typing import Callable, Iterable

from pydantic import TypeAdapter, ValidationError

from prdforge.errors import StorageError, VersionNotFoundError, VersionPersistError
from prdforge.logging import get_logger
from prdforge.models.feature import Feature
from prdforge.models.version import FeatureSnapshot, Version, VersionSummary
from prdforge.storage.protocol import KeyValueStore
from prdforge.utils.ids import MonotonicIds, wall_clock_ms

logger = get_logger(__name__)

_LOG_ADAPTER = TypeAdapter(list[Version])


def default_timestamp() -> str:
    """Human-readable local creation time."""

    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


class VersionStore:
    """In-memory version log mirrored to a key-value store.

    Args:
        store: Backing key-value store.
        key: Storage key holding the serialized log.
        clock: Integer clock used for ids; defaults to wall-clock milliseconds.
        timestamp: Callable producing the display timestamp for new versions.
        autoload: Load the persisted log during construction.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str,
        *,
        clock: Callable[[], int] = wall_clock_ms,
        timestamp: Callable[[], str] = default_timestamp,
        autoload: bool = True,
    ) -> None:
        self._store = store
        self._key = key
        self._lock = threading.RLock()
        self._ids = MonotonicIds(clock)
        self._timestamp = timestamp
        self._versions: list[Version] = []
        self._by_id: dict[int, Version] = {}

        if autoload:
            self.load_from_storage()

    def __len__(self) -> int:
        return len(self._versions)

    def load_from_storage(self) -> None:
        """Replace the in-memory log with the persisted one.

        Anything that is not a well-formed, strictly id-ordered array of versions (validated
        strictly: integer ids, string fields, a features array on every record) is treated as
        corrupt: it is discarded, removed from storage, and the log starts empty.
        """

        with self._lock:
            self._load()

    def _load(self) -> None:
        self._reset_memory()
        try:
            raw = self._store.get(self._key)
        except StorageError:
            logger.exception("Failed to read version log key=%s; starting empty", self._key)
            return
        if raw is None:
            return

        try:
            versions = _LOG_ADAPTER.validate_json(raw, strict=True)
            _check_ordering(versions)
        except (ValidationError, ValueError) as e:
            logger.warning("Discarding corrupt version log key=%s: %s", self._key, e)
            try:
                self._store.remove(self._key)
            except StorageError:
                logger.exception("Failed to remove corrupt version log key=%s", self._key)
            return

        for v in versions:
            self._index(v)
        logger.info("Loaded %d versions from key=%s", len(self._versions), self._key)

    def append(self, content: str, features: Iterable[Feature]) -> Version:
        """Create a new version and persist the full log.

        Args:
            content: Draft content (an HTML fragment).
            features: Features at creation time; frozen into snapshots so later edits do not leak in.

        Returns:
            The stored Version.

        Raises:
            VersionPersistError: The log could not be written. The version remains in memory.
        """

        snapshots = tuple(FeatureSnapshot.of(f) for f in features)
        with self._lock:
            version = Version(
                id=self._ids.next_id(),
                timestamp=self._timestamp(),
                content=content,
                features=snapshots,
            )
            self._index(version)

            try:
                self._persist()
            except (StorageError, TypeError, ValueError) as e:
                logger.warning("Version %d appended but not persisted: %s", version.id, e)
                raise VersionPersistError(version, e) from e

        logger.info("Appended version id=%d (log size=%d)", version.id, len(self._versions))
        return version

    def list(self) -> list[VersionSummary]:  # noqa: A003
        """Id/timestamp projection in insertion order (oldest first)."""

        return [v.summary() for v in self._versions]

    def versions(self) -> list[Version]:
        return list(self._versions)

    def latest(self) -> Version | None:
        return self._versions[-1] if self._versions else None

    def get(self, version_id: int) -> Version:
        """Get a version by id.

        Raises:
            VersionNotFoundError: No such version.
        """

        try:
            return self._by_id[version_id]
        except KeyError:
            raise VersionNotFoundError(version_id) from None

    def clear(self) -> None:
        """Empty the log and remove its persisted record. Irreversible."""

        with self._lock:
            self._reset_memory()
            self._store.remove(self._key)
        logger.info("Cleared version log key=%s", self._key)

    def _index(self, version: Version) -> None:
        self._versions.append(version)
        self._by_id[version.id] = version
        self._ids.observe(version.id)

    def _reset_memory(self) -> None:
        self._versions = []
        self._by_id = {}
        self._ids.reset()

    def _persist(self) -> None:
        payload = [v.model_dump(mode="json") for v in self._versions]
        self._store.set(self._key, json.dumps(payload, ensure_ascii=False))


def _check_ordering(versions: list[Version]) -> None:
    prev: int | None = None
    for v in versions:
        if prev is not None and v.id <= prev:
            raise ValueError(f"version ids not strictly increasing at id={v.id}")
        prev = v.id
