"""
Document sources for vault search.

Usage:
    # Get source (auto-configured from env):
    from vault_search.sources import get_document_source

    source = get_document_source()
    await source.connect()
    documents = await source.fetch_searchable_documents()

    # Or create specific implementation:
    from vault_search.sources import InMemoryDocumentSource

    source = InMemoryDocumentSource.from_json_file("documents.json")
"""

from .base import BaseDocumentSource, DocumentSourceError
from .memory import InMemoryDocumentSource
from .postgres import PostgresDocumentSource
from .factory import DocumentSourceFactory


def get_document_source(force_reload: bool = False) -> BaseDocumentSource:
    """Get configured document source (factory convenience function)."""
    return DocumentSourceFactory.create(force_reload=force_reload)


__all__ = [
    'BaseDocumentSource',
    'DocumentSourceError',
    'InMemoryDocumentSource',
    'PostgresDocumentSource',
    'DocumentSourceFactory',
    'get_document_source',
]
