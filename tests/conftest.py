"""Shared fixtures: in-memory storage and scripted generation services."""

from __future__ import annotations

from typing import Callable, Sequence

import pytest

from prdforge.generation.orchestrator import GenerationOrchestrator
from prdforge.history.version_store import VersionStore
from prdforge.models.feature import Feature, TemplateId
from prdforge.notifications import Notifier
from prdforge.preferences import FontPreference
from prdforge.session import PrdSession
from prdforge.storage.memory import MemoryKeyValueStore

VERSIONS_KEY = "test_prd_versions"
FONT_KEY = "test_prd_font"


class ScriptedService:
    """Generation service returning canned content or raising a canned error."""

    def __init__(self, content: str = "<p>Hello</p>", error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.calls: list[tuple[list[Feature], TemplateId]] = []

    def generate(self, features: Sequence[Feature], template_id: TemplateId) -> str:
        self.calls.append((list(features), template_id))
        if self.error is not None:
            raise self.error
        return self.content


def counter_clock(start: int = 1_000) -> Callable[[], int]:
    value = [start - 1]

    def clock() -> int:
        value[0] += 1
        return value[0]

    return clock


@pytest.fixture
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def store(kv: MemoryKeyValueStore) -> VersionStore:
    return VersionStore(kv, VERSIONS_KEY, clock=counter_clock())


@pytest.fixture
def service() -> ScriptedService:
    return ScriptedService()


@pytest.fixture
def make_session(kv: MemoryKeyValueStore) -> Callable[..., PrdSession]:
    def factory(svc: ScriptedService | None = None) -> PrdSession:
        store = VersionStore(kv, VERSIONS_KEY)
        return PrdSession(
            store=store,
            orchestrator=GenerationOrchestrator(svc or ScriptedService(), store),
            fonts=FontPreference(kv, FONT_KEY),
            notifier=Notifier(ttl_s=60.0),
        )

    return factory
