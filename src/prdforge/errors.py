"""Exception hierarchy.

Failures from the generation service are not raised to callers of ``generate``; they are
classified into :class:`prdforge.generation.errors.ClassifiedError` values instead. The
exceptions below cover contract violations and local storage/export problems.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prdforge.models.version import Version


class PrdForgeError(Exception):
    """Base class for all PRDForge errors."""


class ConfigurationError(PrdForgeError):
    """Required configuration is missing or invalid."""


class GenerationInProgressError(PrdForgeError):
    """A generation request is already in flight."""


class VersionNotFoundError(PrdForgeError, LookupError):
    """No version with the requested id exists in the log."""

    def __init__(self, version_id: int) -> None:
        super().__init__(f"Version {version_id} not found")
        self.version_id = version_id


class StorageError(PrdForgeError):
    """The key-value store could not read or write a record."""


class VersionPersistError(StorageError):
    """A version was appended in memory but the log could not be persisted."""

    def __init__(self, version: Version, cause: Exception) -> None:
        super().__init__(f"Version {version.id} kept in memory but not persisted: {cause}")
        self.version = version
        self.cause = cause


class ExportError(PrdForgeError):
    """Rendering the draft to an export format failed."""
