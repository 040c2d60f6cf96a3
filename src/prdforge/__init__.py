"""PRDForge: generate product requirement documents and keep their version history."""

from __future__ import annotations

__version__ = "0.1.0"
