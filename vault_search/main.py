"""
Vault Search - FastAPI application for keyword search over extracted documents

Search pipeline:
- Normalize the query into terms (lowercase, whitespace split, drop <= 2 chars)
- Fetch ready documents with extracted text from the document source
- Score each document (filename bonus + capped term occurrences)
- Return ranked results with context snippets and previews

The upload / text-extraction pipeline, authentication and the chat assistant
are separate services; this one only reads their documents.
"""

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

# Load environment variables from .env.local (local dev) or .env (production)
from dotenv import load_dotenv

env_local = Path(__file__).parent.parent / ".env.local"
env_file = Path(__file__).parent.parent / ".env"

if env_local.exists():
    load_dotenv(env_local, override=True)
elif env_file.exists():
    load_dotenv(env_file, override=True)

# Configure logging: console (brief) + file (detailed)
from vault_search.logging_config import setup_logging

log_level = os.getenv("LOG_LEVEL", "INFO").upper()
console_level = getattr(logging, log_level, logging.INFO)
setup_logging(
    log_file=os.getenv("LOG_FILE", "logs/vault-search.log"),
    console_level=console_level,
    file_level=logging.DEBUG  # Always DEBUG in file for troubleshooting
)

logger = logging.getLogger(__name__)


from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator

from .search import DEFAULT_LIMIT, SearchResult, highlight_segments, normalize_query, search
from .sources import BaseDocumentSource, DocumentSourceError, DocumentSourceFactory, get_document_source

# Configuration from environment variables
PORT = int(os.getenv("PORT", "8080"))
SEARCH_DEFAULT_LIMIT = int(os.getenv("SEARCH_DEFAULT_LIMIT", str(DEFAULT_LIMIT)))
SEARCH_MAX_LIMIT = int(os.getenv("SEARCH_MAX_LIMIT", "100"))

# Version tracking
APP_VERSION = "0.1.0"
APP_START_TIME = datetime.now(timezone.utc)

# Global instances
document_source: Optional[BaseDocumentSource] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup resources"""
    global document_source

    document_source = get_document_source()
    logger.info(f"Connecting document source: {document_source.get_source_info()}")
    await document_source.connect()

    yield

    logger.info("Shutting down...")
    await document_source.disconnect()
    DocumentSourceFactory.cleanup()
    document_source = None


app = FastAPI(
    title="Vault Search API",
    description="Keyword search with context snippets over extracted document text",
    version=APP_VERSION,
    lifespan=lifespan,
)

# CORS middleware for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure properly in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class HealthResponse(BaseModel):
    status: str
    version: str
    started_at: str
    uptime_seconds: float
    document_source: dict


class SearchRequest(BaseModel):
    query: str = Field(default="", description="Free-text query; terms of 2 characters or fewer are ignored")
    limit: Optional[int] = Field(
        default=None,
        description=f"Maximum number of results (default: {SEARCH_DEFAULT_LIMIT}, capped at {SEARCH_MAX_LIMIT}). "
                    "Zero or negative returns no results."
    )
    highlight: bool = Field(
        default=False,
        description="Attach highlighted segments to every match context"
    )

    @field_validator("query", mode="before")
    @classmethod
    def query_to_text(cls, value: Any) -> str:
        # Non-string queries search for nothing instead of failing validation
        return value if isinstance(value, str) else ""

    @field_validator("limit", mode="before")
    @classmethod
    def limit_to_int(cls, value: Any) -> Optional[int]:
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            return 0
        return value

    class Config:
        json_schema_extra = {
            "example": {
                "query": "sales revenue",
                "limit": 20,
                "highlight": False,
            }
        }


class HighlightSegmentItem(BaseModel):
    text: str
    highlighted: bool


class MatchItem(BaseModel):
    term: str
    position: int = Field(..., description="Character offset of the match in the document text")
    context: str = Field(..., description="Text around the match, '...' marks cut edges")
    segments: Optional[List[HighlightSegmentItem]] = None


class SearchResultItem(BaseModel):
    id: str
    filename: str
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    created_at: Optional[str] = None
    score: int
    matches: List[MatchItem]
    preview: str


class SearchResponse(BaseModel):
    query: str
    results: List[SearchResultItem]
    total: int


class DocumentDetail(BaseModel):
    id: str
    filename: str
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    created_at: Optional[str] = None
    status: str
    extracted_text: Optional[str] = None


def _effective_limit(requested: Optional[int]) -> int:
    if requested is None:
        return SEARCH_DEFAULT_LIMIT
    return min(requested, SEARCH_MAX_LIMIT)


def _require_source() -> BaseDocumentSource:
    if document_source is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Document source not initialized",
        )
    return document_source


def _to_result_item(result: SearchResult, terms: List[str], with_highlight: bool) -> SearchResultItem:
    matches = []
    for match in result.matches:
        segments = None
        if with_highlight:
            segments = [
                HighlightSegmentItem(text=s.text, highlighted=s.highlighted)
                for s in highlight_segments(match.context, terms)
            ]
        matches.append(MatchItem(
            term=match.term,
            position=match.position,
            context=match.context,
            segments=segments,
        ))

    return SearchResultItem(
        id=result.id,
        filename=result.filename,
        file_size=result.size,
        mime_type=result.mime_type,
        created_at=result.created_at,
        score=result.score,
        matches=matches,
        preview=result.preview,
    )


# Routes
@app.get("/", response_model=dict)
async def root():
    """Root endpoint"""
    return {
        "service": "Vault Search API",
        "version": APP_VERSION,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint"""
    uptime = (datetime.now(timezone.utc) - APP_START_TIME).total_seconds()

    return HealthResponse(
        status="healthy" if document_source is not None else "starting",
        version=APP_VERSION,
        started_at=APP_START_TIME.isoformat(),
        uptime_seconds=round(uptime, 2),
        document_source=document_source.get_source_info() if document_source else {},
    )


@app.post("/v1/search", response_model=SearchResponse)
async def search_documents_endpoint(request: SearchRequest):
    """
    Keyword search over all ready documents

    **Scoring:**
    - +10 for every query term found in the filename (once per term)
    - +1 for each of the first 3 occurrences of every term in the text

    **Response includes:**
    - `score`: relevance score (results sorted descending, ties keep source order)
    - `matches`: up to 5 matches with `term`, `position` and `context` (±50 chars)
    - `preview`: first 200 characters of the document text

    Empty queries, or queries made only of 1-2 character words, return no
    results without reading any documents.

    Example:
    ```json
    {"query": "sales revenue", "limit": 20}
    ```
    """
    terms = normalize_query(request.query)
    limit = _effective_limit(request.limit)

    if not terms or limit <= 0:
        return SearchResponse(query=request.query, results=[], total=0)

    source = _require_source()

    try:
        candidates = await source.fetch_searchable_documents()
    except DocumentSourceError as e:
        logger.error(f"Search failed, could not load documents: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to search documents: {str(e)}",
        )

    # Linear scan over the whole working set, keep the event loop free
    results = await asyncio.to_thread(search, terms, candidates, limit)

    logger.info(f"Search {terms}: {len(results)} results from {len(candidates)} documents")

    items = [_to_result_item(r, terms, request.highlight) for r in results]
    return SearchResponse(query=request.query, results=items, total=len(items))


@app.get("/v1/documents/{doc_id}", response_model=DocumentDetail)
async def get_document(doc_id: str):
    """
    Get a document with its extracted text (opens a search result)

    Example:
        GET /v1/documents/3f6c...
    """
    source = _require_source()

    try:
        document = await source.get_document(doc_id)
    except DocumentSourceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get document: {str(e)}",
        )

    if document is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Document {doc_id} not found",
        )

    return DocumentDetail(
        id=document.id,
        filename=document.filename,
        file_size=document.size,
        mime_type=document.mime_type,
        created_at=document.created_at,
        status=document.status,
        extracted_text=document.text,
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": str(exc),
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "vault_search.main:app",
        host="0.0.0.0",
        port=PORT,
        reload=True,  # Development only
    )
