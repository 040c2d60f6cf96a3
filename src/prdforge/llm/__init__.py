"""LLM access."""

from __future__ import annotations

from prdforge.llm.client import ChatMessage, LLMClient

__all__ = ["ChatMessage", "LLMClient"]
