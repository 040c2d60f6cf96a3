"""Search within the rendered draft."""

from __future__ import annotations

from prdforge.search.highlighter import SearchHighlighter, highlight_html, parse_fragment
from prdforge.search.segments import (
    MatchSegment,
    PlainSegment,
    Segment,
    highlight_segments,
    split_text,
    unmark,
)
from prdforge.search.view import DocumentView, RenderedDraft

__all__ = [
    "DocumentView",
    "MatchSegment",
    "PlainSegment",
    "RenderedDraft",
    "SearchHighlighter",
    "Segment",
    "highlight_html",
    "highlight_segments",
    "parse_fragment",
    "split_text",
    "unmark",
]
