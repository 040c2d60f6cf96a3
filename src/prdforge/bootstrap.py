"""Wire settings into a ready-to-use workspace session."""

from __future__ import annotations

from typing import Sequence

from prdforge.config import Settings
from prdforge.errors import ConfigurationError
from prdforge.generation.orchestrator import GenerationOrchestrator, GenerationService
from prdforge.generation.service import PrdGenerator
from prdforge.history.version_store import VersionStore
from prdforge.llm.client import LLMClient
from prdforge.logging import get_logger
from prdforge.models.feature import Feature, TemplateId
from prdforge.notifications import Notifier
from prdforge.preferences import FontPreference
from prdforge.session import PrdSession
from prdforge.storage import build_store
from prdforge.storage.protocol import KeyValueStore

logger = get_logger(__name__)


class UnconfiguredService:
    """Stand-in used when no API key is configured; every call fails as an auth error."""

    def generate(self, features: Sequence[Feature], template_id: TemplateId) -> str:
        raise ConfigurationError("API_KEY_INVALID: PRDFORGE_OPENAI_API_KEY is not set")


def build_service(settings: Settings) -> GenerationService:
    if not settings.openai_api_key:
        logger.warning("PRDFORGE_OPENAI_API_KEY not set; generation requests will fail")
        return UnconfiguredService()
    return PrdGenerator(llm=LLMClient(settings), product_name=settings.product_name)


def create_session(
    settings: Settings,
    *,
    service: GenerationService | None = None,
    kv: KeyValueStore | None = None,
) -> PrdSession:
    """Build a session from settings; `service` and `kv` override the configured ones."""

    kv = kv if kv is not None else build_store(settings)
    store = VersionStore(kv, settings.versions_key)
    orchestrator = GenerationOrchestrator(service or build_service(settings), store)
    return PrdSession(
        store=store,
        orchestrator=orchestrator,
        fonts=FontPreference(kv, settings.font_key, default=settings.default_font),
        notifier=Notifier(settings.notification_ttl_s),
        template=settings.default_template,
        product_name=settings.product_name,
    )
