"""
Query normalizer for document search.

Normalization pipeline:
1. Lowercase conversion
2. Split on runs of whitespace
3. Drop tokens of 2 characters or fewer ("a", "an", "to", "q3")
4. Keep the remaining tokens in query order

Punctuation is not stripped and nothing is stemmed: "sales." stays "sales."
and will only match text that contains the period.
"""

import re
from typing import Any, List

MIN_TERM_LENGTH = 3

_WHITESPACE = re.compile(r"\s+")


def normalize_query(query: Any) -> List[str]:
    """
    Turn a raw query string into search terms.

    Args:
        query: User-typed query (non-string input is treated as empty)

    Returns:
        Lowercase terms in left-to-right order

    Examples:
        >>> normalize_query("Sales Revenue")
        ['sales', 'revenue']

        >>> normalize_query("a an to")
        []

        >>> normalize_query("Q3 sales.")
        ['sales.']
    """
    if not isinstance(query, str) or not query:
        return []

    tokens = _WHITESPACE.split(query.lower())

    return [t for t in tokens if len(t) >= MIN_TERM_LENGTH]
