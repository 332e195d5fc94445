"""
legalrag/context.py
-------------------
Builds the document-context block injected into chat prompts.

Retrieval itself (query embedding + similarity search) is an external
service reached through `ChunkRetriever`. This module only orders what comes
back by chunk_index, so passages read in document order, and formats it.
When nothing usable is found, or retrieval fails, it returns NO_CHUNKS_MARKER
so the caller can fall back to sending the full document text.
"""

from typing import List

from typing_extensions import Protocol, TypedDict

from legalrag.logging_config import get_logger

log = get_logger(__name__)

# ── Constants ──────────────────────────────────────────────────────────────────
NO_CHUNKS_MARKER   = "__NO_CHUNKS__"
CONTEXT_HEADER     = "Relevant document context:"
DEFAULT_MAX_CHUNKS = 3
# ──────────────────────────────────────────────────────────────────────────────


class RetrievedChunk(TypedDict):
    chunk_index: int
    content:     str
    similarity:  float


class ChunkRetriever(Protocol):
    def search(self, document_id: str, query: str, limit: int) -> List[RetrievedChunk]: ...


def format_context(chunks: List[RetrievedChunk]) -> str:
    """Joins chunk contents in document order under CONTEXT_HEADER."""
    ordered = sorted(chunks, key=lambda c: c["chunk_index"])
    body = "\n\n".join(c["content"].strip() for c in ordered)
    return f"{CONTEXT_HEADER}\n{body}"


def build_document_context(
    retriever: ChunkRetriever,
    document_id: str,
    query: str,
    max_chunks: int = DEFAULT_MAX_CHUNKS,
) -> str:
    """
    Retrieves up to max_chunks relevant chunks and formats them as context.

    Args:
        retriever:   Similarity-search collaborator.
        document_id: Document to search within.
        query:       The user's message.
        max_chunks:  Upper bound on passages included.

    Returns:
        The formatted context, or NO_CHUNKS_MARKER if there is nothing to
        include. Retriever errors are logged, not raised.
    """
    if not query or not query.strip():
        log.warning("Empty query for document %s — no context", document_id)
        return NO_CHUNKS_MARKER

    log.info("Retrieving context for document %s, query='%.80s'", document_id, query)
    try:
        found = retriever.search(document_id, query, max_chunks)
    except Exception as exc:
        log.error("Context retrieval for %s failed: %s", document_id, exc)
        return NO_CHUNKS_MARKER

    chunks = [c for c in found[:max_chunks] if c.get("content", "").strip()]
    if not chunks:
        log.warning("No relevant chunks for document %s", document_id)
        return NO_CHUNKS_MARKER

    context = format_context(chunks)
    log.info("Context built from %d chunk(s), %d characters", len(chunks), len(context))
    return context
