"""Literal, case-insensitive term matching over plain text.

This is the rendering-independent core of search highlighting: a text run is split into an
ordered sequence of plain and matched segments whose concatenation is the original text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Union


@dataclass(frozen=True)
class PlainSegment:
    text: str


@dataclass(frozen=True)
class MatchSegment:
    text: str


Segment = Union[PlainSegment, MatchSegment]


def compile_term(term: str) -> re.Pattern[str] | None:
    """Compile a search term into a literal, case-insensitive pattern.

    Returns None for blank terms. The term itself is not trimmed; only the blank check is.
    """

    if not term or not term.strip():
        return None
    return re.compile(f"({re.escape(term)})", re.IGNORECASE)


def split_text(text: str, term: str | re.Pattern[str] | None) -> list[Segment]:
    """Split `text` into alternating plain and matched segments.

    Occurrences are found left to right without overlap. Empty plain pieces are dropped, so the
    result is empty only for empty text.
    """

    pattern = compile_term(term) if isinstance(term, str) or term is None else term
    if not text:
        return []
    if pattern is None:
        return [PlainSegment(text)]

    segments: list[Segment] = []
    # With one capture group, odd indices of re.split are the matches.
    for i, part in enumerate(pattern.split(text)):
        if i % 2 == 1:
            segments.append(MatchSegment(part))
        elif part:
            segments.append(PlainSegment(part))
    return segments


def join_segments(segments: Iterable[Segment]) -> str:
    return "".join(s.text for s in segments)


def unmark(segments: Iterable[Segment]) -> list[Segment]:
    """Drop all match boundaries, merging the run back into one plain segment."""

    text = join_segments(segments)
    return [PlainSegment(text)] if text else []


def highlight_segments(segments: Iterable[Segment], term: str) -> list[Segment]:
    """Re-derive highlights for a text run, discarding any previous ones."""

    return split_text(join_segments(unmark(segments)), term)
