"""Tests for the LLM-backed generation service and prompt building."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from prdforge.bootstrap import UnconfiguredService, build_service
from prdforge.config import Settings
from prdforge.errors import ConfigurationError
from prdforge.generation.errors import ErrorKind, classify_error
from prdforge.generation.service import PrdGenerator, strip_code_fence
from prdforge.llm.client import ChatMessage, LLMClient
from prdforge.models.feature import Feature, TemplateId
from prdforge.prompts import TEMPLATE_GUIDANCE, build_prd_prompt, format_feature_list


class FakeCompletions:
    def __init__(self, reply: str | None) -> None:
        self.reply = reply
        self.kwargs: dict[str, Any] = {}

    def create(self, **kwargs: Any) -> Any:
        self.kwargs = kwargs
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(reply: str | None) -> tuple[LLMClient, FakeCompletions]:
    completions = FakeCompletions(reply)
    openai = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    settings = Settings(openai_model="test-model", openai_timeout_s=42.0)
    return LLMClient(settings, client=openai), completions  # type: ignore[arg-type]


def test_feature_list_skips_blank_names() -> None:
    """It should render only named features, with optional descriptions."""

    features = [
        Feature(id=1, name="Security Health Bot", description="Scans contracts"),
        Feature(id=2, name="   "),
        Feature(id=3, name="Dynamic Integration Layer"),
    ]
    assert format_feature_list(features) == (
        "- Security Health Bot: Scans contracts\n- Dynamic Integration Layer"
    )


@pytest.mark.parametrize("template", list(TemplateId))
def test_prompt_mentions_template_and_product(template: TemplateId) -> None:
    """It should embed the methodology guidance and product name."""

    prompt = build_prd_prompt([Feature(id=1, name="Dashboard")], template, product_name="Acme")
    assert '"Acme"' in prompt
    assert TEMPLATE_GUIDANCE[template] in prompt
    assert "- Dashboard" in prompt
    assert "Revision History" in prompt


def test_strip_code_fence() -> None:
    """It should remove a surrounding html fence only."""

    assert strip_code_fence("```html\n<p>x</p>\n```") == "<p>x</p>"
    assert strip_code_fence("```\n<p>x</p>```") == "<p>x</p>"
    assert strip_code_fence("  <p>x</p>\n") == "<p>x</p>"


def test_generator_sends_system_and_user_messages() -> None:
    """It should call the chat API with configured model and timeout."""

    llm, completions = _client("```html\n<h2>PRD</h2>\n```")
    generator = PrdGenerator(llm=llm, product_name="Acme")

    html = generator.generate([Feature(id=1, name="Dashboard")], TemplateId.WATERFALL)

    assert html == "<h2>PRD</h2>"
    assert completions.kwargs["model"] == "test-model"
    assert completions.kwargs["timeout"] == 42.0
    roles = [m["role"] for m in completions.kwargs["messages"]]
    assert roles == ["system", "user"]
    assert TEMPLATE_GUIDANCE[TemplateId.WATERFALL] in completions.kwargs["messages"][1]["content"]


def test_empty_completion_becomes_empty_string() -> None:
    """It should return an empty string when the model returns no content."""

    llm, _ = _client(None)
    assert llm.complete([ChatMessage(role="user", content="hi")]) == ""


def test_client_requires_api_key() -> None:
    """It should refuse to build an SDK client without a key."""

    with pytest.raises(ConfigurationError):
        LLMClient(Settings(openai_api_key=None))


def test_missing_key_service_fails_as_auth_error() -> None:
    """It should surface a missing key as an authentication failure."""

    service = build_service(Settings(openai_api_key=None))
    assert isinstance(service, UnconfiguredService)

    with pytest.raises(ConfigurationError) as excinfo:
        service.generate([Feature(id=1, name="x")], TemplateId.AGILE)
    assert classify_error(excinfo.value).kind is ErrorKind.AUTH
