"""In-document search highlighting over a parsed HTML tree.

Matches are wrapped in ``<mark class="search-highlight">`` elements. Every pass first removes
the marks a previous pass inserted and merges their text back into the surrounding strings, so
repeated searches never accumulate markup and an empty term restores the original text.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, NavigableString, Tag

from prdforge.logging import get_logger
from prdforge.search.segments import MatchSegment, compile_term, split_text

logger = get_logger(__name__)

HIGHLIGHT_TAG = "mark"
HIGHLIGHT_CLASS = "search-highlight"
HIDDEN_PARENTS = frozenset({"script", "style", "noscript", "template", "head", "title"})


def parse_fragment(html: str) -> BeautifulSoup:
    """Parse an HTML fragment without adding html/body wrappers."""

    return BeautifulSoup(html, "html.parser")


class SearchHighlighter:
    """Mark literal, case-insensitive occurrences of a term inside an HTML tree."""

    def __init__(self, *, tag: str = HIGHLIGHT_TAG, css_class: str = HIGHLIGHT_CLASS) -> None:
        self.tag = tag
        self.css_class = css_class

    def clear(self, root: Tag) -> int:
        """Replace every highlight mark under `root` with its text. Returns marks removed."""

        marks = root.find_all(self.tag, class_=self.css_class)
        for mark in marks:
            mark.replace_with(NavigableString(mark.get_text()))
        if marks:
            root.smooth()
        return len(marks)

    def highlight(self, root: Tag, term: str) -> int:
        """Highlight `term` in the visible text under `root`, in place.

        Returns:
            Number of matches marked.
        """

        self.clear(root)
        pattern = compile_term(term)
        if pattern is None:
            return 0

        targets = [
            s
            for s in root.find_all(string=True)
            if self._is_visible_text(s, root) and pattern.search(s)
        ]

        soup = _owning_document(root)
        total = 0
        for node in targets:
            segments = split_text(str(node), pattern)
            replacements: list[NavigableString | Tag] = []
            for seg in segments:
                if isinstance(seg, MatchSegment):
                    replacements.append(self._new_mark(soup, seg.text))
                    total += 1
                else:
                    replacements.append(NavigableString(seg.text))
            node.replace_with(*replacements)

        logger.debug("Highlighted %d matches in %d text nodes", total, len(targets))
        return total

    def _is_visible_text(self, node: NavigableString, root: Tag) -> bool:
        # Comments, CDATA, doctypes and script/style strings are NavigableString subclasses.
        if type(node) is not NavigableString:
            return False
        for parent in node.parents:
            if parent.name in HIDDEN_PARENTS:
                return False
            if parent is root:
                break
        return True

    def _new_mark(self, soup: BeautifulSoup | None, text: str) -> Tag:
        attrs = {"class": self.css_class}
        if soup is not None:
            mark = soup.new_tag(self.tag, attrs=attrs)
        else:
            mark = Tag(name=self.tag, attrs=attrs)
        mark.string = text
        return mark


def _owning_document(node: Tag) -> BeautifulSoup | None:
    top = node
    while top.parent is not None:
        top = top.parent
    return top if isinstance(top, BeautifulSoup) else None


def highlight_html(html: str, term: str, *, highlighter: SearchHighlighter | None = None) -> str:
    """Return `html` with `term` highlighted."""

    soup = parse_fragment(html)
    (highlighter or SearchHighlighter()).highlight(soup, term)
    return str(soup)
