"""
Term-frequency scorer with context snippets.

Scoring (per document, independent of every other document):
    score = FILENAME_WEIGHT × (terms found in filename)
          + Σ min(occurrences of term in text, MAX_OCCURRENCES_PER_TERM)

Filename bonus is flat per term: a term that appears in the filename several
times still adds FILENAME_WEIGHT once.

Each counted occurrence is recorded as a Match with a context window of
CONTEXT_RADIUS characters on both sides. Matches are aggregated over all terms
and the first MAX_MATCHES_PER_DOCUMENT are kept, so with several terms some
counted occurrences may not be listed.

Ranking:
    Documents with score 0 are dropped, the rest are sorted by descending score
    with a stable sort (ties keep candidate order) and truncated to limit.
"""

import logging
import re
from typing import Iterable, List, Optional, Sequence

from .models import READY_STATUS, Document, Match, SearchResult
from .tokenizer import normalize_query

logger = logging.getLogger(__name__)

FILENAME_WEIGHT = 10
MAX_OCCURRENCES_PER_TERM = 3
MAX_MATCHES_PER_DOCUMENT = 5
CONTEXT_RADIUS = 50
PREVIEW_LENGTH = 200
ELLIPSIS = "..."
DEFAULT_LIMIT = 10


def is_searchable(document: Document) -> bool:
    """Only ready documents with extracted text take part in search"""
    return document.status == READY_STATUS and bool(document.text)


def extract_context(text: str, start: int, end: int, radius: int = CONTEXT_RADIUS) -> str:
    """
    Cut a snippet around text[start:end].

    The window is clamped to the text bounds and stripped; ellipsis markers
    show that the window was cut on that side.

    Example:
        >>> extract_context("Revenue grew 12% in Q3", 0, 7, radius=5)
        'Revenue gro...'
    """
    window_start = max(0, start - radius)
    window_end = min(len(text), end + radius)

    context = text[window_start:window_end].strip()

    prefix = ELLIPSIS if window_start > 0 else ""
    suffix = ELLIPSIS if window_end < len(text) else ""

    return f"{prefix}{context}{suffix}"


def build_preview(text: str) -> str:
    """Leading excerpt of the document, always followed by an ellipsis"""
    return text[:PREVIEW_LENGTH] + ELLIPSIS


def _find_occurrences(term: str, text: str) -> Iterable[re.Match]:
    # Terms are matched literally; "c++" or "(draft)" are not patterns
    return re.finditer(re.escape(term), text, re.IGNORECASE)


def score_document(terms: Sequence[str], document: Document) -> Optional[SearchResult]:
    """
    Score a single document against normalized query terms.

    Args:
        terms: Normalized (lowercase) query terms
        document: Candidate document, never modified

    Returns:
        SearchResult, or None if the document is not searchable or scored 0
    """
    if not is_searchable(document):
        return None

    text = document.text
    filename = document.filename.lower()

    score = 0
    matches: List[Match] = []

    for term in terms:
        if term in filename:
            score += FILENAME_WEIGHT

    for term in terms:
        for count, occurrence in enumerate(_find_occurrences(term, text)):
            if count >= MAX_OCCURRENCES_PER_TERM:
                break

            score += 1
            matches.append(Match(
                term=term,
                position=occurrence.start(),
                context=extract_context(text, occurrence.start(), occurrence.end()),
            ))

    if score == 0:
        return None

    return SearchResult(
        id=document.id,
        filename=document.filename,
        size=document.size,
        mime_type=document.mime_type,
        created_at=document.created_at,
        score=score,
        matches=matches[:MAX_MATCHES_PER_DOCUMENT],
        preview=build_preview(text),
    )


def search(terms: Sequence[str], candidates: Sequence[Document], limit: int) -> List[SearchResult]:
    """
    Rank candidate documents for the given terms.

    Args:
        terms: Normalized query terms (see normalize_query)
        candidates: Documents to scan, in the order ties should keep
        limit: Maximum number of results (<= 0 returns nothing)

    Returns:
        Results sorted by descending score, at most `limit` entries
    """
    if not terms or not candidates or limit <= 0:
        return []

    results = [
        result
        for result in (score_document(terms, doc) for doc in candidates)
        if result is not None
    ]

    # sorted() is stable, reverse=True included
    results = sorted(results, key=lambda r: r.score, reverse=True)

    logger.debug(
        f"Scored {len(candidates)} documents for {len(terms)} terms: "
        f"{len(results)} hits, returning {min(len(results), limit)}"
    )

    return results[:limit]


def search_documents(query: str, candidates: Sequence[Document], limit: int = DEFAULT_LIMIT) -> List[SearchResult]:
    """
    Normalize a raw query and search the candidates.

    Empty and all-short queries ("", "   ", "a an to") return [] without
    scanning any document.
    """
    terms = normalize_query(query)
    if not terms:
        return []

    return search(terms, candidates, limit)
