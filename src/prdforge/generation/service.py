"""LLM-backed PRD generation service."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

from prdforge.llm.client import ChatMessage, LLMClient
from prdforge.models.feature import Feature, TemplateId
from prdforge.prompts import PRD_SYSTEM_PROMPT, build_prd_prompt

_FENCE_RE = re.compile(r"^\s*```(?:html)?\s*\n(.*?)\n?```\s*$", re.DOTALL | re.IGNORECASE)


def strip_code_fence(text: str) -> str:
    """Remove a single surrounding ``` / ```html fence, if present."""

    m = _FENCE_RE.match(text)
    return m.group(1).strip() if m else text.strip()


@dataclass(frozen=True)
class PrdGenerator:
    """Generate a PRD HTML fragment from a feature list.

    Errors from the LLM SDK are not caught here; the orchestrator classifies them.
    """

    llm: LLMClient
    product_name: str

    def generate(self, features: Sequence[Feature], template_id: TemplateId) -> str:
        messages = [
            ChatMessage(role="system", content=PRD_SYSTEM_PROMPT),
            ChatMessage(
                role="user",
                content=build_prd_prompt(features, template_id, product_name=self.product_name),
            ),
        ]
        return strip_code_fence(self.llm.complete(messages))
