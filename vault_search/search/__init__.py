"""
Keyword search over extracted document text.

Components:
- tokenizer: query normalization into search terms
- scorer: term-frequency scoring with filename bonus and context snippets
- highlight: term highlighting for display (not used by the scorer)
- models: Document / Match / SearchResult

No index is built: every query scans the current working set of documents,
which is fine for tens to low thousands of documents.
"""

from .models import Document, Match, SearchResult
from .tokenizer import normalize_query
from .scorer import DEFAULT_LIMIT, score_document, search, search_documents
from .highlight import HighlightSegment, highlight_markup, highlight_segments

__all__ = [
    "Document",
    "Match",
    "SearchResult",
    "normalize_query",
    "score_document",
    "search",
    "search_documents",
    "DEFAULT_LIMIT",
    "HighlightSegment",
    "highlight_segments",
    "highlight_markup",
]
