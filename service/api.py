"""
service/api.py
--------------
Lightweight FastAPI service layer exposing the document chunker.

Endpoints:
    GET  /health  →  service status and chunking parameters
    POST /chunk   { userId, documentId, documentText, metadata?, targetTokens? }
                  →  { success, documentId, chunkCount, chunks: [ChunkInfo] }

Chunking is pure and in-process; embedding and storage of the returned chunks
stay with the caller.

Run with:
    uvicorn service.api:app --host 0.0.0.0 --port 8000
"""

from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from app import TARGET_TOKENS, chunk_document
from legalrag.chunker         import CHARS_PER_TOKEN
from legalrag.logging_config  import get_logger
from validator.json_validator import ValidationError, validate_chunk_request

log = get_logger(__name__)


# ── Request model ──────────────────────────────────────────────────────────────

class ChunkDocumentRequest(BaseModel):
    """Input schema for the /chunk endpoint."""
    userId:       str
    documentId:   str
    documentText: str
    metadata:     Optional[Dict[str, Any]] = None
    targetTokens: Optional[float] = Field(default=None, gt=0)


# ── FastAPI app ────────────────────────────────────────────────────────────────

app = FastAPI(
    title       = "Legal Document Chunking API",
    description = "Splits extracted legal document text into sentence-aligned chunks for embedding.",
    version     = "1.0.0",
)


# ── Endpoints ──────────────────────────────────────────────────────────────────

@app.get("/health", tags=["ops"])
def health_check():
    """Liveness probe: reports the default chunking parameters."""
    return {
        "status":          "ok",
        "target_tokens":   TARGET_TOKENS,
        "chars_per_token": CHARS_PER_TOKEN,
    }


@app.post("/chunk", tags=["chunking"])
def chunk(request: ChunkDocumentRequest):
    """
    Validate a chunk-document request and return its chunks.

    Raises:
        400 Bad Request:          missing fields or unsupported file type
        422 Unprocessable Entity: malformed body (pydantic)
    """
    payload = request.model_dump(exclude_none=True)
    target  = payload.pop("targetTokens", TARGET_TOKENS)

    try:
        validated = validate_chunk_request(payload)
    except ValidationError as exc:
        log.error("POST /chunk rejected — %s", exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    log.info("POST /chunk — documentId=%s chars=%d target=%s",
             validated["documentId"], len(validated["documentText"]), target)
    report = chunk_document(validated["documentText"], target)

    log.info("POST /chunk complete — %d chunks", report["chunk_count"])
    return {
        "success":    True,
        "documentId": validated["documentId"],
        "chunkCount": report["chunk_count"],
        "chunks":     report["chunks"],
    }
