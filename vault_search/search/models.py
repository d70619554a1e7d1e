"""
Data types shared by the search engine and the document sources.

All of them are transient: documents are loaded fresh for every query and
results are recomputed on every call.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

READY_STATUS = "ready"


@dataclass(frozen=True)
class Document:
    """Extracted document as supplied by the storage layer (read-only)"""
    id: str
    filename: str
    text: Optional[str] = None      # Extracted plain text, None if extraction failed
    size: Optional[int] = None
    mime_type: Optional[str] = None
    created_at: Optional[str] = None  # ISO 8601
    status: str = READY_STATUS      # processing | ready | error

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Document":
        """
        Build a Document from a storage record.

        Accepts the column names used by the documents table
        (extracted_text, file_size, mime_type, created_at) as well as the
        short attribute names.
        """
        created_at = record.get("created_at")
        if created_at is not None and not isinstance(created_at, str):
            created_at = created_at.isoformat()

        text = record.get("extracted_text", record.get("text"))

        return cls(
            id=str(record["id"]),
            filename=record.get("filename") or "",
            text=text,
            size=record.get("file_size", record.get("size")),
            mime_type=record.get("mime_type"),
            created_at=created_at,
            status=record.get("status") or READY_STATUS,
        )


@dataclass
class Match:
    """One occurrence of a query term inside a document"""
    term: str
    position: int   # Offset into the original text
    context: str    # Snippet around the occurrence


@dataclass
class SearchResult:
    """Scored document with its matches and a leading preview"""
    id: str
    filename: str
    size: Optional[int]
    mime_type: Optional[str]
    created_at: Optional[str]
    score: int
    matches: List[Match] = field(default_factory=list)
    preview: str = ""
