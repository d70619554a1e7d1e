"""
In-memory document source.

Used for local development and tests. Documents can be passed directly or
loaded from a JSON file holding an array of document records:

    [
        {
            "id": "1",
            "filename": "Q3-report.pdf",
            "extracted_text": "Revenue grew 12% in Q3...",
            "file_size": 48213,
            "mime_type": "application/pdf",
            "created_at": "2025-01-15T10:00:00Z",
            "status": "ready"
        }
    ]
"""

import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..search.models import Document
from ..search.scorer import is_searchable
from .base import BaseDocumentSource, DocumentSourceError

logger = logging.getLogger(__name__)


class InMemoryDocumentSource(BaseDocumentSource):
    """Documents held in a list, in insertion order"""

    def __init__(self, documents: Optional[Iterable[Document]] = None, path: Optional[str] = None):
        self._documents: List[Document] = list(documents or [])
        self.path = path

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "InMemoryDocumentSource":
        """
        Load documents from a JSON file.

        Raises:
            DocumentSourceError: if the file is missing or not a list of records
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                records = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise DocumentSourceError(f"Failed to load documents from {path}: {e}") from e

        if not isinstance(records, list):
            raise DocumentSourceError(f"Expected a JSON array of documents in {path}")

        try:
            documents = [Document.from_record(record) for record in records]
        except (KeyError, TypeError, AttributeError) as e:
            raise DocumentSourceError(f"Invalid document record in {path}: {e}") from e

        logger.info(f"Loaded {len(documents)} documents from {path}")
        return cls(documents, path=str(path))

    def add(self, document: Document):
        """Add or replace a document (replacement keeps its position)"""
        for i, existing in enumerate(self._documents):
            if existing.id == document.id:
                self._documents[i] = document
                return
        self._documents.append(document)

    async def fetch_searchable_documents(self) -> List[Document]:
        return [doc for doc in self._documents if is_searchable(doc)]

    async def get_document(self, doc_id: str) -> Optional[Document]:
        for doc in self._documents:
            if doc.id == doc_id:
                return doc
        return None

    def get_source_info(self) -> dict:
        return {
            "type": "memory",
            "documents": len(self._documents),
            "path": self.path,
        }
