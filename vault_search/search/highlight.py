"""
Term highlighting for search result display.

Kept apart from the scorer: results carry plain text and the display layer
decides how matched terms are marked. Two forms are offered:
- highlight_segments: structured (text, highlighted) pieces for clients
- highlight_markup: HTML-escaped string with <mark> wrapping
"""

import html
import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple


@dataclass(frozen=True)
class HighlightSegment:
    """Consecutive piece of text, marked if it matched a term"""
    text: str
    highlighted: bool


def _matched_spans(text: str, terms: Sequence[str]) -> List[Tuple[int, int]]:
    spans = []
    for term in set(t for t in terms if t):
        for m in re.finditer(re.escape(term), text, re.IGNORECASE):
            spans.append((m.start(), m.end()))

    # Merge overlapping and touching spans ("sales" inside "salesforce" + "force")
    merged: List[Tuple[int, int]] = []
    for start, end in sorted(spans):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))

    return merged


def highlight_segments(text: str, terms: Sequence[str]) -> List[HighlightSegment]:
    """
    Split text into highlighted and plain segments.

    Joining all segment texts gives back the input unchanged.

    Example:
        >>> highlight_segments("Sales grew", ["sales"])
        [HighlightSegment(text='Sales', highlighted=True), HighlightSegment(text=' grew', highlighted=False)]
    """
    if not text:
        return []

    segments: List[HighlightSegment] = []
    cursor = 0

    for start, end in _matched_spans(text, terms):
        if start > cursor:
            segments.append(HighlightSegment(text[cursor:start], False))
        segments.append(HighlightSegment(text[start:end], True))
        cursor = end

    if cursor < len(text):
        segments.append(HighlightSegment(text[cursor:], False))

    return segments


def highlight_markup(
    text: str,
    terms: Sequence[str],
    open_tag: str = "<mark>",
    close_tag: str = "</mark>",
) -> str:
    """Render highlighted segments as HTML (text content is escaped)"""
    parts = []
    for segment in highlight_segments(text, terms):
        escaped = html.escape(segment.text)
        parts.append(f"{open_tag}{escaped}{close_tag}" if segment.highlighted else escaped)
    return "".join(parts)
