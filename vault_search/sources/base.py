"""
Abstract base class for document sources.

A source supplies the working set the search engine scans. All sources must
implement this interface to be swappable.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..search.models import Document


class DocumentSourceError(Exception):
    """Backing store could not be read"""


class BaseDocumentSource(ABC):
    """
    Abstract base class for document sources.

    All sources must implement this interface to be swappable.
    """

    async def connect(self):
        """Optional setup (open connection pools, load files, etc.)"""
        pass

    async def disconnect(self):
        """Optional cleanup"""
        pass

    @abstractmethod
    async def fetch_searchable_documents(self) -> List[Document]:
        """
        Fetch every document that can be searched.

        Returns:
            Documents with status "ready" and non-empty extracted text,
            in a stable order (ties in ranking keep this order)

        Raises:
            DocumentSourceError: if the backing store fails
        """
        pass

    @abstractmethod
    async def get_document(self, doc_id: str) -> Optional[Document]:
        """
        Fetch a single document by id.

        Returns:
            Document, or None if it does not exist
        """
        pass

    @abstractmethod
    def get_source_info(self) -> dict:
        """
        Get information about the source.

        Returns:
            Dict with keys: type, plus type-specific details
        """
        pass
