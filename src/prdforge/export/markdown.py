"""HTML fragment to Markdown conversion."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup
from markdownify import ATX, MarkdownConverter

from prdforge.search.highlighter import HIGHLIGHT_TAG

SKIPPED = ("script", "style", "noscript", "template", "head", "title")

_BLANK_LINES_RE = re.compile(r"\n{3,}")

# ATX headings and "-" bullets at every depth; literal *, _, #, [ etc. in text are escaped
MARKDOWN_OPTIONS = {"heading_style": ATX, "bullets": "-", "escape_misc": True}


def html_to_markdown(html: str) -> str:
    """Convert a generated PRD fragment to GitHub-flavoured Markdown.

    Search highlight marks are unwrapped first, so converting a highlighted rendering gives the
    same output as the plain content.
    """

    soup = BeautifulSoup(html, "lxml")
    for tag in soup.find_all(SKIPPED):
        tag.decompose()
    for mark in soup.find_all(HIGHLIGHT_TAG):
        mark.unwrap()
    soup.smooth()

    text = MarkdownConverter(**MARKDOWN_OPTIONS).convert_soup(soup)
    text = _BLANK_LINES_RE.sub("\n\n", text).strip()
    return f"{text}\n" if text else ""
