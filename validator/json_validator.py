"""
validator/json_validator.py
---------------------------
Input schema enforcement for chunk-document requests.

Defines the canonical ChunkRequest TypedDict and validates incoming payloads
against it before any chunking happens. Raises a typed ValidationError on
any schema violation.

Only text that was extracted from a PDF, DOCX or TXT upload is accepted; the
extension is taken from metadata.filename (falling back to metadata.title).
"""

import json
from typing import Any, Dict, Optional

from typing_extensions import TypedDict

from legalrag.logging_config import get_logger

log = get_logger(__name__)

# ── Constants ──────────────────────────────────────────────────────────────────
ALLOWED_EXTENSIONS = ("pdf", "docx", "txt")
# ──────────────────────────────────────────────────────────────────────────────


# ── Schema definition ──────────────────────────────────────────────────────────

class RequestMetadata(TypedDict, total=False):
    filename:   str
    title:      str
    pageNumber: int


class _ChunkRequestBase(TypedDict):
    userId:       str   # owner of the upload ("anonymous" allowed)
    documentId:   str   # id shared by every chunk of the document
    documentText: str   # plain extracted text


class ChunkRequest(_ChunkRequestBase, total=False):
    """Canonical input contract for chunking a document."""
    metadata: RequestMetadata


# ── Custom exception ───────────────────────────────────────────────────────────

class ValidationError(ValueError):
    """Raised when a chunk request fails schema validation."""


# ── Validators ─────────────────────────────────────────────────────────────────

def validate_json_string(raw: str) -> Dict[str, Any]:
    """
    Parses a JSON string and returns the decoded dict.

    Raises:
        ValidationError: If the string is not valid JSON or not an object.
    """
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Invalid JSON: {exc}") from exc
    if not isinstance(decoded, dict):
        raise ValidationError("Request body must be a JSON object.")
    return decoded


def file_extension(metadata: Optional[Dict[str, Any]]) -> str:
    """Lowercased extension of metadata.filename, else metadata.title, else "unknown"."""
    metadata = metadata or {}
    name = metadata.get("filename") or metadata.get("title") or "unknown"
    return str(name).rsplit(".", 1)[-1].lower()


def validate_chunk_request(payload: Dict[str, Any]) -> ChunkRequest:
    """
    Validates a dict against the ChunkRequest schema.

    Checks:
      - userId, documentId, documentText are present, non-empty strings
      - metadata, when given, is a dict
      - the file extension is one of ALLOWED_EXTENSIONS

    Returns:
        The same dict cast as a typed ChunkRequest.

    Raises:
        ValidationError: On the first violated rule.
    """
    for key in ("userId", "documentId", "documentText"):
        value = payload.get(key)
        if not isinstance(value, str) or not value.strip():
            log.error("Validation failed — field '%s' missing or empty", key)
            raise ValidationError(f"Missing required fields: '{key}' must be a non-empty string.")

    metadata = payload.get("metadata")
    if metadata is not None and not isinstance(metadata, dict):
        log.error("Validation failed — metadata is %s, not a dict", type(metadata).__name__)
        raise ValidationError("metadata must be an object.")

    extension = file_extension(metadata)
    if extension not in ALLOWED_EXTENSIONS:
        log.error("Validation failed — unsupported file type '%s'", extension)
        raise ValidationError(
            f"Unsupported file type '{extension}'. "
            "Please upload PDF, DOCX, or TXT files only."
        )

    log.info(
        "Validation succeeded — documentId=%s type=%s chars=%d",
        payload["documentId"], extension, len(payload["documentText"]),
    )
    return ChunkRequest(**payload)  # type: ignore[typeddict-item]
