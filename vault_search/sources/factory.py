"""
Factory to create document source instances based on configuration.
"""

from typing import Optional
import os
import logging

from .base import BaseDocumentSource
from .memory import InMemoryDocumentSource
from .postgres import PostgresDocumentSource

logger = logging.getLogger(__name__)


class DocumentSourceFactory:
    """Factory to create document sources based on configuration."""

    _instance: Optional[BaseDocumentSource] = None  # Singleton cache

    @classmethod
    def create(cls, force_reload: bool = False) -> BaseDocumentSource:
        """
        Create document source based on environment configuration.

        Config (env vars):
            DOCUMENT_SOURCE: "memory" | "postgres" (default: memory)
            DOCUMENTS_FILE: JSON file with documents (memory source, optional)
            DATABASE_URL: PostgreSQL connection string (postgres source, required)

        Args:
            force_reload: If True, recreate instance even if cached

        Returns:
            Document source instance (not yet connected)
        """
        if cls._instance is not None and not force_reload:
            return cls._instance

        source_type = os.getenv("DOCUMENT_SOURCE", "memory").lower()

        if source_type == "memory":
            documents_file = os.getenv("DOCUMENTS_FILE")
            if documents_file:
                logger.info(f"Creating in-memory document source from {documents_file}")
                cls._instance = InMemoryDocumentSource.from_json_file(documents_file)
            else:
                logger.info("Creating empty in-memory document source")
                cls._instance = InMemoryDocumentSource()

        elif source_type == "postgres":
            database_url = os.getenv("DATABASE_URL")
            if not database_url:
                raise ValueError("DATABASE_URL environment variable is required for postgres document source")
            logger.info("Creating PostgreSQL document source")
            cls._instance = PostgresDocumentSource(database_url)

        else:
            raise ValueError(
                f"Unknown document source type: {source_type}. "
                f"Valid options: memory, postgres"
            )

        return cls._instance

    @classmethod
    def cleanup(cls):
        """Drop cached source instance (caller disconnects it)."""
        if cls._instance is not None:
            logger.info("Cleaning up document source instance")
            cls._instance = None
