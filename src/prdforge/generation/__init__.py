"""PRD generation: orchestration and failure classification."""

from __future__ import annotations

from prdforge.generation.errors import ClassifiedError, ErrorKind, classify_error
from prdforge.generation.orchestrator import (
    GenerationOrchestrator,
    GenerationOutcome,
    GenerationService,
    GenerationState,
    GenerationStatus,
)

__all__ = [
    "ClassifiedError",
    "ErrorKind",
    "GenerationOrchestrator",
    "GenerationOutcome",
    "GenerationService",
    "GenerationState",
    "GenerationStatus",
    "classify_error",
]
