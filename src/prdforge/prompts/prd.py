from __future__ import annotations

from typing import Sequence

from prdforge.models.feature import Feature, TemplateId

PRD_SYSTEM_PROMPT = (
    "You are a world-class AI product manager and senior software architect. "
    "You write exceptionally detailed, actionable product requirements documents. "
    "You MUST output a single clean HTML fragment and nothing else: no markdown code fences, "
    "no <html>, <head> or <body> tags."
)

TEMPLATE_GUIDANCE: dict[TemplateId, str] = {
    TemplateId.AGILE: (
        "Structure the PRD for an Agile team: organise work into epics and user stories, "
        "give acceptance criteria per story, and propose an iterative sprint-based roadmap."
    ),
    TemplateId.WATERFALL: (
        "Structure the PRD for a Waterfall process: define complete, signed-off requirements "
        "up front, sequential phases (requirements, design, implementation, verification, "
        "maintenance) with phase gates and a dated milestone schedule."
    ),
    TemplateId.LEAN: (
        "Structure the PRD using Lean principles: state the riskiest assumptions, define the "
        "minimum viable product, list build-measure-learn experiments with validation metrics."
    ),
    TemplateId.DEFAULT: "Use a conventional, methodology-neutral PRD structure.",
}

PRD_SECTIONS = """\
1. **Revision History**: the absolute first section. An HTML table with a <thead> containing
   the column headers 'Version', 'Date', 'Author', 'Changes' and a <tbody> with one row:
   Version '1.0', today's date, Author 'AI Agent', Changes 'Initial document generation'.
2. **Executive Summary**: Problem Statement, Solution, Target Audience, Unique Value Proposition.
3. **Feature Specifications**: for each feature, Functional Requirements (user-facing
   capabilities, backend processes, acceptance criteria), Technical Implementation Approach
   (strategy, key technologies, risks), Success Metrics and KPIs, Priority Level (P0/P1/P2)
   and Dependencies.
4. **User Stories**: 2-3 stories for the highest-priority features, in the form
   "As a [user type], I want [functionality] so that [benefit]".
5. **Technical Architecture Overview**: core components and their interactions, data flow and
   storage requirements, API and integration points.
6. **Go-to-Market Strategy**: target user personas, tiered pricing model, phased rollout plan."""

PRD_FORMAT_RULES = """\
- Use <h2> for main section titles, <h3> for feature titles and <h4> for sub-sections.
- Use <ul>/<li> for bullet points, <strong> for emphasis and labels, <p> for paragraphs.
- Use a proper <table> with <thead>, <tbody>, <tr>, <th> and <td> for tables.
- The output must be ready to be injected directly into a <div>."""


def format_feature_list(features: Sequence[Feature]) -> str:
    """Render non-blank features as `name: description` lines."""

    lines: list[str] = []
    for f in features:
        if f.is_blank():
            continue
        name = f.name.strip()
        desc = f.description.strip()
        lines.append(f"- {name}: {desc}" if desc else f"- {name}")
    return "\n".join(lines)


def build_prd_prompt(
    features: Sequence[Feature],
    template_id: TemplateId,
    *,
    product_name: str,
) -> str:
    """Build the user prompt for one PRD generation."""

    return (
        f'Create a product requirements document for a product called "{product_name}".\n\n'
        f"Methodology: {TEMPLATE_GUIDANCE[template_id]}\n\n"
        "Feature Categories:\n"
        "---\n"
        f"{format_feature_list(features)}\n"
        "---\n\n"
        "The PRD must include the following sections, precisely in this order:\n"
        f"{PRD_SECTIONS}\n\n"
        "Output Formatting Instructions:\n"
        f"{PRD_FORMAT_RULES}"
    )
