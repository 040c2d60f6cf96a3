"""Export of the current draft to Markdown and PDF."""

from __future__ import annotations

import re

from prdforge.export.markdown import html_to_markdown
from prdforge.export.pdf import PdfRenderer, render_pdf


def export_filename(product_name: str, extension: str) -> str:
    """Download file name, e.g. ``Audityzer-AI-Agent-PRD.md``."""

    slug = re.sub(r"[^A-Za-z0-9]+", "-", product_name).strip("-")
    stem = f"{slug}-PRD" if slug else "PRD"
    return f"{stem}.{extension.lstrip('.')}"


__all__ = ["PdfRenderer", "export_filename", "html_to_markdown", "render_pdf"]
