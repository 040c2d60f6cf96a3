"""PDF rendering of a PRD fragment."""

from __future__ import annotations

import re
from io import BytesIO
from typing import Any
from xml.sax.saxutils import escape

from bs4 import BeautifulSoup, NavigableString, Tag
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    Flowable,
    Paragraph,
    Preformatted,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)
from reportlab.platypus.flowables import HRFlowable

from prdforge.errors import ExportError
from prdforge.logging import get_logger
from prdforge.preferences import theme_background, theme_foreground

logger = get_logger(__name__)

_WS_RE = re.compile(r"\s+")

HEADING_STYLES = {"h1": "Heading1", "h2": "Heading2", "h3": "Heading3", "h4": "Heading4", "h5": "Heading5", "h6": "Heading6"}
CONTAINERS = frozenset(
    {"html", "body", "div", "section", "article", "main", "header", "footer", "nav", "aside", "figure", "blockquote"}
)
SKIPPED = frozenset({"script", "style", "noscript", "template", "head", "title"})


class PdfRenderer:
    """Lay out an HTML fragment as flowing PDF pages on a theme-coloured background.

    Args:
        theme: Theme name; determines page background and text colour.
        title: Document title stored in PDF metadata.
    """

    def __init__(self, theme: str = "theme-dark", *, title: str = "Product Requirements Document") -> None:
        self.theme = theme
        self.title = title
        self.background = colors.HexColor(theme_background(theme))
        self.foreground = colors.HexColor(theme_foreground(theme))
        self._styles = self._build_styles()

    def render(self, html: str) -> bytes:
        """Render `html` to PDF bytes.

        Raises:
            ExportError: Layout or markup failure.
        """

        soup = BeautifulSoup(html, "html.parser")
        buf = BytesIO()
        try:
            story = self._flowables(soup) or [Spacer(1, 1)]
            doc = SimpleDocTemplate(
                buf,
                pagesize=A4,
                leftMargin=18 * mm,
                rightMargin=18 * mm,
                topMargin=18 * mm,
                bottomMargin=18 * mm,
                title=self.title,
            )
            doc.build(story, onFirstPage=self._paint_page, onLaterPages=self._paint_page)
        except Exception as e:
            raise ExportError(f"Could not generate PDF: {e}") from e
        data = buf.getvalue()
        logger.info("Rendered PDF (%d bytes, theme=%s)", len(data), self.theme)
        return data

    def _build_styles(self) -> dict[str, ParagraphStyle]:
        base = getSampleStyleSheet()
        styles: dict[str, ParagraphStyle] = {}
        for name in ("Normal", *HEADING_STYLES.values()):
            styles[name] = ParagraphStyle(f"prd-{name}", parent=base[name], textColor=self.foreground)
        styles["Cell"] = ParagraphStyle("prd-Cell", parent=styles["Normal"], fontSize=9, leading=11)
        styles["Code"] = ParagraphStyle(
            "prd-Code", parent=base["Code"], textColor=self.foreground, backColor=None
        )
        return styles

    def _paint_page(self, canvas: Any, doc: Any) -> None:
        width, height = doc.pagesize
        canvas.saveState()
        canvas.setFillColor(self.background)
        canvas.rect(0, 0, width, height, fill=1, stroke=0)
        canvas.restoreState()

    def _flowables(self, node: Tag) -> list[Flowable]:
        out: list[Flowable] = []
        pending: list[str] = []

        def flush() -> None:
            text = _WS_RE.sub(" ", "".join(pending)).strip()
            if text:
                out.append(Paragraph(text, self._styles["Normal"]))
            pending.clear()

        for child in node.children:
            if isinstance(child, NavigableString):
                pending.append(self._markup(child))
                continue
            if not isinstance(child, Tag) or child.name in SKIPPED:
                continue

            name = child.name
            if name in HEADING_STYLES:
                flush()
                out.append(Paragraph(self._markup(child).strip(), self._styles[HEADING_STYLES[name]]))
            elif name == "p":
                flush()
                out.append(Paragraph(self._markup(child).strip(), self._styles["Normal"]))
            elif name in ("ul", "ol"):
                flush()
                out.extend(self._list(child, depth=0))
            elif name == "table":
                flush()
                table = self._table(child)
                if table is not None:
                    out.extend([table, Spacer(1, 4 * mm)])
            elif name == "pre":
                flush()
                out.append(Preformatted(child.get_text(), self._styles["Code"]))
            elif name == "hr":
                flush()
                out.append(HRFlowable(width="100%", color=self.foreground))
            elif name in CONTAINERS:
                flush()
                out.extend(self._flowables(child))
            else:
                pending.append(self._markup(child))

        flush()
        return out

    def _markup(self, node: object) -> str:
        """Convert inline HTML to reportlab paragraph markup."""

        if isinstance(node, NavigableString):
            return escape(_WS_RE.sub(" ", str(node))) if type(node) is NavigableString else ""
        if not isinstance(node, Tag) or node.name in SKIPPED:
            return ""

        name = node.name
        if name == "br":
            return "<br/>"
        inner = "".join(self._markup(c) for c in node.children)
        if name in ("strong", "b"):
            return f"<b>{inner}</b>"
        if name in ("em", "i"):
            return f"<i>{inner}</i>"
        if name == "u":
            return f"<u>{inner}</u>"
        if name == "code":
            return f'<font face="Courier">{inner}</font>'
        return inner

    def _list(self, node: Tag, *, depth: int) -> list[Flowable]:
        ordered = node.name == "ol"
        style = ParagraphStyle(
            f"prd-list-{depth}",
            parent=self._styles["Normal"],
            leftIndent=12 * (depth + 1),
            bulletIndent=12 * depth + 2,
        )
        out: list[Flowable] = []
        for index, item in enumerate(node.find_all("li", recursive=False), start=1):
            nested: list[Tag] = []
            parts: list[str] = []
            for c in item.children:
                if isinstance(c, Tag) and c.name in ("ul", "ol"):
                    nested.append(c)
                else:
                    parts.append(self._markup(c))
            bullet = f"{index}." if ordered else "•"
            text = _WS_RE.sub(" ", "".join(parts)).strip()
            out.append(Paragraph(text, style, bulletText=bullet))
            for sub in nested:
                out.extend(self._list(sub, depth=depth + 1))
        return out

    def _table(self, node: Tag) -> Table | None:
        rows: list[list[Paragraph]] = []
        header_rows = 0
        for tr in node.find_all("tr"):
            cells = tr.find_all(["th", "td"], recursive=False)
            if not cells:
                continue
            if all(c.name == "th" for c in cells) and header_rows == len(rows):
                header_rows += 1
            rows.append([Paragraph(self._markup(c).strip(), self._styles["Cell"]) for c in cells])
        if not rows:
            return None

        width = max(len(r) for r in rows)
        rows = [r + [Paragraph("", self._styles["Cell"])] * (width - len(r)) for r in rows]
        table = Table(rows, repeatRows=header_rows)
        commands: list[tuple[Any, ...]] = [
            ("GRID", (0, 0), (-1, -1), 0.5, self.foreground),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ]
        if header_rows:
            commands.append(("LINEBELOW", (0, header_rows - 1), (-1, header_rows - 1), 1.2, self.foreground))
        table.setStyle(TableStyle(commands))
        return table


def render_pdf(html: str, theme: str = "theme-dark", *, title: str = "Product Requirements Document") -> bytes:
    """Render an HTML fragment to PDF bytes."""

    return PdfRenderer(theme, title=title).render(html)
