from __future__ import annotations

from prdforge.prompts.prd import PRD_SYSTEM_PROMPT, TEMPLATE_GUIDANCE, build_prd_prompt, format_feature_list

__all__ = [
    "PRD_SYSTEM_PROMPT",
    "TEMPLATE_GUIDANCE",
    "build_prd_prompt",
    "format_feature_list",
]
