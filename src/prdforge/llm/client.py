"""OpenAI-compatible LLM client.

This wraps the `openai` Python SDK and provides a minimal interface for chat completions. The
client is an explicit handle: construct it from settings and pass it to whoever needs it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Sequence

from openai import OpenAI

from prdforge.config import Settings
from prdforge.errors import ConfigurationError
from prdforge.logging import get_logger

logger = get_logger(__name__)

Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    """A chat message."""

    role: Role
    content: str


class LLMClient:
    """LLM client using OpenAI-compatible Chat Completions API."""

    def __init__(self, settings: Settings, *, client: OpenAI | None = None) -> None:
        self._settings = settings
        if client is None:
            if not settings.openai_api_key:
                raise ConfigurationError(
                    "Missing PRDFORGE_OPENAI_API_KEY. "
                    "Set it in environment variables or a .env file."
                )
            client = OpenAI(api_key=settings.openai_api_key, base_url=settings.openai_base_url)
        self._client = client

    def complete(self, messages: Sequence[ChatMessage], *, temperature: float | None = None) -> str:
        """Generate a completion.

        Args:
            messages: Chat messages.
            temperature: Sampling temperature; defaults to the configured one.

        Returns:
            Assistant message content.
        """

        payload: list[dict[str, str]] = [{"role": m.role, "content": m.content} for m in messages]
        resp = self._client.chat.completions.create(
            model=self._settings.openai_model,
            messages=payload,
            temperature=self._settings.temperature if temperature is None else temperature,
            timeout=self._settings.openai_timeout_s,
        )
        choice = resp.choices[0]
        if not choice.message or choice.message.content is None:
            return ""
        return choice.message.content
