"""Workspace session.

Owns the user's working state: the editable feature list, the current draft, the selected
template, theme and font. History operations go through the version store, generation through
the orchestrator, and user-facing messages through the notifier.
"""

from __future__ import annotations

import threading
import uuid
from typing import Sequence

from prdforge.errors import ExportError, StorageError, VersionNotFoundError, VersionPersistError
from prdforge.export import export_filename, html_to_markdown, render_pdf
from prdforge.generation.orchestrator import (
    GenerationOrchestrator,
    GenerationOutcome,
    GenerationState,
    GenerationStatus,
)
from prdforge.history.version_store import VersionStore
from prdforge.logging import get_logger, session_context
from prdforge.models.feature import Feature, TemplateId
from prdforge.models.version import Version, VersionSummary
from prdforge.notifications import Notifier
from prdforge.preferences import DEFAULT_THEME, THEMES, FontPreference
from prdforge.search.view import DocumentView, RenderedDraft
from prdforge.utils.ids import MonotonicIds

logger = get_logger(__name__)

DEFAULT_FEATURE_NAMES: tuple[str, ...] = (
    "Onchain Intelligence Dashboard",
    "AI-Powered Community Concierge",
    "Automated Analytics & Reporting",
    "Gamified Giveaways & Bounties",
    "Security Health Bot",
    "Dynamic Integration Layer",
    "Compliance & Transparency Bot",
)

MSG_GENERATED = "PRD generated and saved as a new version!"
MSG_GENERATED_UNSAVED = "PRD generated, but it could not be saved to history: {error}"
MSG_SAVED = "Current draft saved as a new version!"
MSG_SAVE_FAILED = "Draft kept in this session but could not be saved to storage: {error}"
MSG_SAVE_EMPTY = "Cannot save empty PRD."
MSG_LOADED = "Loaded version from {timestamp}."
MSG_NOT_FOUND = "Could not find the selected version."
MSG_DRAFT_CLEARED = "PRD content cleared."
MSG_HISTORY_CLEARED = "Version history and current PRD have been cleared."
MSG_HISTORY_CLEAR_FAILED = "History cleared for this session, but stored versions could not be removed: {error}"
MSG_PDF_FAILED = "Could not generate PDF. See logs for details."


class PrdSession:
    """Single-user workspace over a version store and a generation orchestrator."""

    def __init__(
        self,
        *,
        store: VersionStore,
        orchestrator: GenerationOrchestrator,
        fonts: FontPreference,
        notifier: Notifier | None = None,
        template: TemplateId | str = TemplateId.AGILE,
        product_name: str = "Audityzer AI Agent",
        session_id: str | None = None,
    ) -> None:
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self.product_name = product_name
        self._store = store
        self._orchestrator = orchestrator
        self._lock = threading.RLock()
        self._fonts = fonts
        self.notifier = notifier or Notifier()
        self.template = TemplateId(template)
        self._feature_ids = MonotonicIds()
        self._features: list[Feature] = self._default_features()
        self._view = DocumentView(theme=DEFAULT_THEME, font=fonts.load())

        orchestrator.subscribe(self._on_generation_state)

        latest = store.latest()
        if latest is not None:
            self._set_draft(latest.content)
            self._replace_features([f.to_feature() for f in latest.features])

    # -- features ---------------------------------------------------------

    @property
    def features(self) -> list[Feature]:
        with self._lock:
            return [f.model_copy() for f in self._features]

    def add_feature(self, name: str = "", description: str = "") -> Feature:
        with self._lock:
            feature = Feature(id=self._feature_ids.next_id(), name=name, description=description)
            self._features.append(feature)
            return feature.model_copy()

    def update_feature(
        self,
        feature_id: int,
        *,
        name: str | None = None,
        description: str | None = None,
    ) -> Feature:
        with self._lock:
            feature = self._find_feature(feature_id)
            if name is not None:
                feature.name = name
            if description is not None:
                feature.description = description
            return feature.model_copy()

    def remove_feature(self, feature_id: int) -> None:
        with self._lock:
            self._features.remove(self._find_feature(feature_id))

    def set_features(self, features: Sequence[Feature]) -> None:
        self._replace_features(features)

    def _find_feature(self, feature_id: int) -> Feature:
        for f in self._features:
            if f.id == feature_id:
                return f
        raise KeyError(f"Feature {feature_id} not found")

    def _replace_features(self, features: Sequence[Feature]) -> None:
        with self._lock:
            self._features = [f.model_copy(deep=True) for f in features]
            for f in self._features:
                self._feature_ids.observe(f.id)

    def _default_features(self) -> list[Feature]:
        return [Feature(id=self._feature_ids.next_id(), name=name) for name in DEFAULT_FEATURE_NAMES]

    # -- generation -------------------------------------------------------

    @property
    def generation_state(self) -> GenerationState:
        return self._orchestrator.state

    def _on_generation_state(self, state: GenerationState) -> None:
        if state.status is GenerationStatus.IN_FLIGHT:
            self._set_draft("")
        elif state.status is GenerationStatus.SUCCEEDED and state.content is not None:
            self._set_draft(state.content)

    def generate(self) -> GenerationOutcome:
        """Generate a PRD from the current features and template."""

        with session_context(session_id=self.session_id, stage="generate"):
            outcome = self._orchestrator.generate(self.features, self.template)
            if outcome.content is not None:
                if outcome.saved:
                    self.notifier.notify(MSG_GENERATED)
                else:
                    self.notifier.notify(MSG_GENERATED_UNSAVED.format(error=outcome.persist_error))
            return outcome

    # -- draft & history --------------------------------------------------

    @property
    def draft(self) -> str:
        return self._view.content

    def save_draft(self) -> Version | None:
        """Save the current draft as a new version."""

        if not self.draft.strip():
            self.notifier.notify(MSG_SAVE_EMPTY)
            return None
        with session_context(session_id=self.session_id, stage="save"):
            try:
                version = self._store.append(self.draft, self.features)
            except VersionPersistError as e:
                self.notifier.notify(MSG_SAVE_FAILED.format(error=e.cause))
                return e.version
        self.notifier.notify(MSG_SAVED)
        return version

    def load_version(self, version_id: int) -> Version | None:
        try:
            version = self._store.get(version_id)
        except VersionNotFoundError:
            self.notifier.notify(MSG_NOT_FOUND)
            return None
        self._set_draft(version.content)
        self._replace_features([f.to_feature() for f in version.features])
        self.notifier.notify(MSG_LOADED.format(timestamp=version.timestamp))
        return version

    def clear_draft(self) -> None:
        self._set_draft("")
        self.notifier.notify(MSG_DRAFT_CLEARED)

    def clear_history(self) -> bool:
        """Drop every version, the draft, and reset features to the defaults.

        Returns:
            False when the persisted log could not be removed; it will reappear on next start.
        """

        with session_context(session_id=self.session_id, stage="clear"):
            self._set_draft("")
            with self._lock:
                self._features = self._default_features()
            try:
                self._store.clear()
            except StorageError as e:
                logger.exception("Failed to remove persisted version log")
                self.notifier.notify(MSG_HISTORY_CLEAR_FAILED.format(error=e))
                return False
        self.notifier.notify(MSG_HISTORY_CLEARED)
        return True

    def get_version(self, version_id: int) -> Version:
        """Get a stored version.

        Raises:
            VersionNotFoundError: No such version.
        """

        return self._store.get(version_id)

    def history(self) -> list[VersionSummary]:
        """Version summaries, newest first."""

        return list(reversed(self._store.list()))

    def _set_draft(self, content: str) -> None:
        self._view.set_content(content)

    # -- display ----------------------------------------------------------

    @property
    def theme(self) -> str:
        return self._view.theme

    @property
    def font(self) -> str:
        return self._view.font

    def set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme}")
        self._view.set_theme(theme)

    def set_font(self, font: str) -> None:
        """Select and persist a font.

        Raises:
            ValueError: Unknown font.
        """

        try:
            self._fonts.save(font)
        except StorageError:
            logger.exception("Failed to persist font preference")
        self._view.set_font(font)

    def search(self, term: str) -> RenderedDraft:
        return self._view.search(term)

    def view(self) -> RenderedDraft:
        return self._view.render()

    # -- export -----------------------------------------------------------

    def export_markdown(self) -> tuple[str, str] | None:
        """Markdown export of the unhighlighted draft as `(filename, text)`."""

        if not self.draft:
            return None
        return export_filename(self.product_name, "md"), html_to_markdown(self.draft)

    def export_pdf(self) -> tuple[str, bytes] | None:
        """PDF export of the unhighlighted draft as `(filename, bytes)`."""

        if not self.draft:
            return None
        with session_context(session_id=self.session_id, stage="export"):
            try:
                data = render_pdf(self.draft, self.theme, title=f"{self.product_name} PRD")
            except ExportError:
                logger.exception("PDF export failed")
                self.notifier.notify(MSG_PDF_FAILED)
                return None
        return export_filename(self.product_name, "pdf"), data
