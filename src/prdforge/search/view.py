"""Live highlighted view of the current draft."""

from __future__ import annotations

import threading
from dataclasses import dataclass

from prdforge.search.highlighter import SearchHighlighter, parse_fragment


@dataclass(frozen=True)
class RenderedDraft:
    """A rendering instruction for the display surface."""

    html: str
    term: str
    matches: int
    theme: str
    font: str


class DocumentView:
    """Keeps a parsed draft and re-runs highlighting whenever an input changes.

    Content, search term, theme and font are all inputs: changing any of them triggers a fresh
    clear-and-mark pass over the tree, so highlights never refer to stale content. The tree is
    shared mutable state: every read and write holds the view lock.
    """

    def __init__(
        self,
        *,
        theme: str = "theme-dark",
        font: str = "font-inter",
        highlighter: SearchHighlighter | None = None,
    ) -> None:
        self._lock = threading.RLock()
        self._highlighter = highlighter or SearchHighlighter()
        self._content = ""
        self._tree = parse_fragment("")
        self._term = ""
        self._theme = theme
        self._font = font
        self._matches = 0

    @property
    def content(self) -> str:
        return self._content

    @property
    def term(self) -> str:
        return self._term

    @property
    def theme(self) -> str:
        return self._theme

    @property
    def font(self) -> str:
        return self._font

    @property
    def matches(self) -> int:
        return self._matches

    def set_content(self, content: str) -> None:
        with self._lock:
            self._content = content
            self._tree = parse_fragment(content)
            self._refresh()

    def set_term(self, term: str) -> None:
        with self._lock:
            self._term = term
            self._refresh()

    def set_theme(self, theme: str) -> None:
        with self._lock:
            self._theme = theme
            self._refresh()

    def set_font(self, font: str) -> None:
        with self._lock:
            self._font = font
            self._refresh()

    def search(self, term: str) -> RenderedDraft:
        """Set the term and render in one step, so the result belongs to this term."""

        with self._lock:
            self.set_term(term)
            return self.render()

    def render(self) -> RenderedDraft:
        with self._lock:
            return RenderedDraft(
                html=str(self._tree),
                term=self._term,
                matches=self._matches,
                theme=self._theme,
                font=self._font,
            )

    def _refresh(self) -> None:
        self._matches = self._highlighter.highlight(self._tree, self._term)
