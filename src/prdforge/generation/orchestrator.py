"""Generation orchestrator.

Sequences a single generation request: validate input, clear stale display state, call the
generation service, then either append the result to the version log or classify the failure.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol, Sequence

from prdforge.errors import GenerationInProgressError, VersionPersistError
from prdforge.generation.errors import ClassifiedError, classify_error, validation_error
from prdforge.history.version_store import VersionStore
from prdforge.logging import get_logger, log_exception
from prdforge.models.feature import Feature, TemplateId
from prdforge.models.version import Version

logger = get_logger(__name__)


class GenerationService(Protocol):
    """External collaborator producing the structured document."""

    def generate(self, features: Sequence[Feature], template_id: TemplateId) -> str:
        ...


class GenerationStatus(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class GenerationState:
    """What the display surface should show for the current request."""

    status: GenerationStatus = GenerationStatus.IDLE
    content: str | None = None
    error: ClassifiedError | None = None

    @property
    def busy(self) -> bool:
        return self.status is GenerationStatus.IN_FLIGHT


@dataclass(frozen=True)
class GenerationOutcome:
    """Result of one `generate` call: either content or a classified error."""

    content: str | None = None
    error: ClassifiedError | None = None
    version: Version | None = None
    saved: bool = False
    persist_error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


StateListener = Callable[[GenerationState], None]


class GenerationOrchestrator:
    """Drive at most one generation request at a time.

    Args:
        service: Generation service handle, constructed and owned by the caller.
        store: Version log receiving successful results.
        classifier: Maps raw failures to classified errors.
    """

    def __init__(
        self,
        service: GenerationService,
        store: VersionStore,
        *,
        classifier: Callable[[object], ClassifiedError] = classify_error,
    ) -> None:
        self._service = service
        self._store = store
        self._classify = classifier
        self._lock = threading.Lock()
        self._state = GenerationState()
        self._draft = ""
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> GenerationState:
        return self._state

    @property
    def draft(self) -> str:
        """Content of the last successful generation."""

        return self._draft

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    def subscribe(self, listener: StateListener) -> None:
        """Register a callback invoked on every state transition."""

        self._listeners.append(listener)

    def generate(
        self,
        features: Sequence[Feature],
        template_id: TemplateId | str = TemplateId.AGILE,
    ) -> GenerationOutcome:
        """Run one generation request.

        Raises:
            GenerationInProgressError: Another request has not resolved yet.
        """

        if not self._lock.acquire(blocking=False):
            raise GenerationInProgressError("A PRD generation is already in progress")
        try:
            return self._run(features, TemplateId(template_id))
        finally:
            self._lock.release()

    def _run(self, features: Sequence[Feature], template_id: TemplateId) -> GenerationOutcome:
        if not features or all(f.is_blank() for f in features):
            error = validation_error()
            self._set_state(GenerationState(GenerationStatus.FAILED, error=error))
            logger.info("Generation rejected: empty feature list")
            return GenerationOutcome(error=error)

        snapshot = [f.model_copy(deep=True) for f in features]
        # Stale content/errors must not be visible while the request is outstanding.
        self._set_state(GenerationState(GenerationStatus.IN_FLIGHT))
        logger.info("Generation started (features=%d, template=%s)", len(snapshot), template_id.value)

        try:
            content = self._service.generate(snapshot, template_id)
        except Exception as e:
            log_exception(logger, "Generation failed", template=template_id.value)
            error = self._classify(e)
            self._set_state(GenerationState(GenerationStatus.FAILED, error=error))
            logger.info("Generation error classified as %s", error.kind.value)
            return GenerationOutcome(error=error)

        self._draft = content
        saved = True
        persist_error: str | None = None
        try:
            version = self._store.append(content, snapshot)
        except VersionPersistError as e:
            version = e.version
            saved = False
            persist_error = str(e.cause)

        self._set_state(GenerationState(GenerationStatus.SUCCEEDED, content=content))
        logger.info("Generation succeeded (version=%d, chars=%d)", version.id, len(content))
        return GenerationOutcome(
            content=content,
            version=version,
            saved=saved,
            persist_error=persist_error,
        )

    def _set_state(self, state: GenerationState) -> None:
        self._state = state
        for listener in self._listeners:
            listener(state)
