"""Unit test configuration - isolated environment and sample documents"""

import os
from pathlib import Path

import pytest

# Set env vars BEFORE importing vault_search.main
# main.py configures logging and reads limits at module level (on import)
os.environ["LOG_FILE"] = ""
os.environ.setdefault("DOCUMENT_SOURCE", "memory")

from vault_search.search.models import Document

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


@pytest.fixture
def documents_file():
    """JSON file with two ready documents and one still processing"""
    return FIXTURES_DIR / "documents.json"


@pytest.fixture
def q3_report():
    return Document(
        id="1",
        filename="Q3-report.pdf",
        text="Revenue grew 12% in Q3 driven by enterprise sales. Sales teams exceeded targets.",
        size=48213,
        mime_type="application/pdf",
        created_at="2025-01-15T10:00:00Z",
    )


@pytest.fixture
def sales_deck():
    return Document(
        id="2",
        filename="sales-deck.pptx",
        text="Unrelated content about logistics.",
        size=1203344,
        mime_type="application/vnd.openxmlformats-officedocument.presentationml.presentation",
        created_at="2025-01-14T09:30:00Z",
    )


@pytest.fixture
def processing_doc():
    return Document(
        id="3",
        filename="sales-pending.pdf",
        text=None,
        status="processing",
    )
