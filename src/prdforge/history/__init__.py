"""Version history."""

from __future__ import annotations

from prdforge.history.version_store import VersionStore

__all__ = ["VersionStore"]
