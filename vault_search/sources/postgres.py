"""
PostgreSQL document source.

Reads the documents table written by the upload / text-extraction pipeline:

    documents (
        id              UUID PRIMARY KEY,
        filename        TEXT NOT NULL,
        extracted_text  TEXT,
        file_size       BIGINT,
        mime_type       TEXT,
        status          TEXT,          -- processing | ready | error
        created_at      TIMESTAMPTZ
    )

Only rows with status 'ready' and extracted text are fetched for search.
The table is owned by the pipeline; this module never writes to it.
"""

import logging
from typing import List, Optional

import asyncpg

from ..search.models import Document
from .base import BaseDocumentSource, DocumentSourceError

logger = logging.getLogger(__name__)

DOCUMENT_COLUMNS = "id, filename, extracted_text, created_at, file_size, mime_type, status"

# Server-side errors, client/pool misuse and network failures
DATABASE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


class PostgresDocumentSource(BaseDocumentSource):
    """Documents table in PostgreSQL (asyncpg pool)"""

    def __init__(self, database_url: str, min_size: int = 1, max_size: int = 10):
        self.pool: Optional[asyncpg.Pool] = None
        # asyncpg doesn't understand 'postgresql+asyncpg://', only 'postgresql://'
        self.connection_string = database_url.replace("postgresql+asyncpg://", "postgresql://")
        self.min_size = min_size
        self.max_size = max_size

    async def connect(self):
        """Initialize connection pool"""
        try:
            self.pool = await asyncpg.create_pool(
                self.connection_string,
                min_size=self.min_size,
                max_size=self.max_size,
            )
        except DATABASE_ERRORS as e:
            raise DocumentSourceError(f"Failed to connect to PostgreSQL: {e}") from e

        logger.info(f"Connected to PostgreSQL: {self.connection_string.split('@')[-1]}")

    async def disconnect(self):
        """Close connection pool"""
        if self.pool is not None:
            await self.pool.close()
            self.pool = None
            logger.info("Disconnected from PostgreSQL")

    def _require_pool(self) -> asyncpg.Pool:
        if self.pool is None:
            raise DocumentSourceError("PostgreSQL source is not connected")
        return self.pool

    async def fetch_searchable_documents(self) -> List[Document]:
        pool = self._require_pool()
        try:
            async with pool.acquire() as conn:
                rows = await conn.fetch(f"""
                    SELECT {DOCUMENT_COLUMNS}
                    FROM documents
                    WHERE status = 'ready'
                      AND extracted_text IS NOT NULL
                    ORDER BY created_at DESC, id
                """)
        except DATABASE_ERRORS as e:
            logger.error(f"Failed to fetch searchable documents: {e}")
            raise DocumentSourceError(f"Failed to fetch documents: {e}") from e

        documents = [Document.from_record(dict(row)) for row in rows]
        logger.debug(f"Fetched {len(documents)} searchable documents")
        return documents

    async def get_document(self, doc_id: str) -> Optional[Document]:
        pool = self._require_pool()
        try:
            async with pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"SELECT {DOCUMENT_COLUMNS} FROM documents WHERE id::text = $1",
                    str(doc_id),
                )
        except DATABASE_ERRORS as e:
            logger.error(f"Failed to fetch document {doc_id}: {e}")
            raise DocumentSourceError(f"Failed to fetch document {doc_id}: {e}") from e

        return Document.from_record(dict(row)) if row else None

    def get_source_info(self) -> dict:
        return {
            "type": "postgres",
            "host": self.connection_string.split("@")[-1],
            "connected": self.pool is not None,
        }
