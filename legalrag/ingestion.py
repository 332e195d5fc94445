"""
legalrag/ingestion.py
---------------------
Document ingestion layer: chunk → embed → store.

Takes plain text already extracted from an uploaded PDF/DOCX/TXT file, splits
it with `split_into_chunks`, embeds every chunk in document order and hands
the resulting rows to a chunk store in a single insert. The list position of
each chunk is persisted as `chunk_index` so retrieved passages can be cited
and reassembled in their original order.

The embedding model and the store are external services. They are reached
only through the `Embedder` and `ChunkStore` protocols below; this module
never talks to a network or database itself.
"""

from pathlib import Path
from typing import Dict, List, Optional

from typing_extensions import Protocol, TypedDict

from legalrag.chunker        import DEFAULT_TARGET_TOKENS, split_into_chunks
from legalrag.logging_config import get_logger

log = get_logger(__name__)

_PREVIEW_CHARS  = 100
_PREVIEW_CHUNKS = 3


# ── Record schema ──────────────────────────────────────────────────────────────

class DocumentMetadata(TypedDict, total=False):
    """Optional upload metadata supplied by the caller."""
    filename:   str
    title:      str
    pageNumber: int


class ChunkMetadata(TypedDict):
    page_number: Optional[int]
    title:       Optional[str]
    user_id:     Optional[str]


class ChunkRecord(TypedDict):
    """One row of the chunk store."""
    document_id: str
    chunk_index: int          # position of the chunk in the document
    content:     str
    embedding:   List[float]
    metadata:    ChunkMetadata


# ── Collaborator interfaces ────────────────────────────────────────────────────

class Embedder(Protocol):
    def embed(self, text: str) -> List[float]: ...


class ChunkStore(Protocol):
    def insert(self, records: List[ChunkRecord]) -> None: ...


# ── Exceptions ─────────────────────────────────────────────────────────────────

class IngestionError(RuntimeError):
    """Raised when a document cannot be chunked, embedded or stored."""


class EmbeddingError(IngestionError):
    """The embedder failed or returned an empty vector."""


class StorageError(IngestionError):
    """The chunk store rejected the insert."""


# ── Public API ─────────────────────────────────────────────────────────────────

def build_chunk_records(
    document_id: str,
    chunks: List[str],
    embedder: Embedder,
    user_id: Optional[str] = None,
    metadata: Optional[DocumentMetadata] = None,
) -> List[ChunkRecord]:
    """
    Embeds each chunk and wraps it in a ChunkRecord.

    Raises:
        EmbeddingError: If the embedder raises or returns an empty vector.
    """
    metadata = metadata or {}
    chunk_metadata = ChunkMetadata(
        page_number = metadata.get("pageNumber"),
        title       = metadata.get("title"),
        user_id     = user_id,
    )

    records: List[ChunkRecord] = []
    for index, chunk in enumerate(chunks):
        try:
            embedding = embedder.embed(chunk)
        except Exception as exc:
            log.error("Embedding failed for chunk %d of %s: %s", index, document_id, exc)
            raise EmbeddingError(
                f"Embedding generation failed for chunk {index}: {exc}"
            ) from exc

        if not embedding:
            log.error("Embedder returned no vector for chunk %d of %s", index, document_id)
            raise EmbeddingError(f"No embedding returned for chunk {index}")

        records.append(ChunkRecord(
            document_id = document_id,
            chunk_index = index,
            content     = chunk,
            embedding   = list(embedding),
            metadata    = ChunkMetadata(**chunk_metadata),
        ))

    return records


def process_document(
    user_id: str,
    document_id: str,
    document_text: str,
    embedder: Embedder,
    store: ChunkStore,
    metadata: Optional[DocumentMetadata] = None,
    target_tokens: float = DEFAULT_TARGET_TOKENS,
) -> List[ChunkRecord]:
    """
    Chunks, embeds and stores a single uploaded document.

    Args:
        user_id:       Owner of the document (recorded in chunk metadata).
        document_id:   Identifier shared by every stored chunk.
        document_text: Plain extracted text.
        embedder:      Embedding collaborator.
        store:         Chunk persistence collaborator.
        metadata:      Optional filename/title/pageNumber.
        target_tokens: Approximate token budget per chunk.

    Returns:
        The records that were stored, in chunk order.

    Raises:
        IngestionError: If the text is blank or yields no chunks.
        EmbeddingError: If any chunk cannot be embedded.
        StorageError:   If the store insert fails.
    """
    log.info("Processing document %s for user %s (%d chars)",
             document_id, user_id, len(document_text or ""))

    if not document_text or not document_text.strip():
        log.error("Document %s has empty text", document_id)
        raise IngestionError("Document text is empty")

    chunks = split_into_chunks(document_text, target_tokens)
    if not chunks:
        log.error("Document %s produced no chunks", document_id)
        raise IngestionError("No chunks generated from document")

    for i, chunk in enumerate(chunks[:_PREVIEW_CHUNKS], start=1):
        log.debug("Chunk %d preview: %s…", i, chunk[:_PREVIEW_CHARS])

    records = build_chunk_records(document_id, chunks, embedder, user_id, metadata)

    try:
        store.insert(records)
    except Exception as exc:
        log.error("Storing %d chunks for %s failed: %s", len(records), document_id, exc)
        raise StorageError(f"Chunk store insert failed: {exc}") from exc

    log.info("Stored %d chunks for document %s", len(records), document_id)
    return records


def ingest_directory(
    data_dir: Path,
    embedder: Embedder,
    store: ChunkStore,
    user_id: str = "local",
    target_tokens: float = DEFAULT_TARGET_TOKENS,
) -> Dict[str, int]:
    """
    Processes every .txt file in data_dir as its own document.

    The file stem becomes the document id and the file name the title.

    Returns:
        {filename: chunk_count} in sorted filename order.

    Raises:
        FileNotFoundError: If data_dir contains no .txt files.
        IngestionError:    Propagated from process_document.
    """
    log.info("Ingestion started — scanning %s", data_dir)
    txt_files = sorted(Path(data_dir).glob("*.txt"))
    if not txt_files:
        raise FileNotFoundError(f"No .txt files found in {data_dir}.")

    counts: Dict[str, int] = {}
    for filepath in txt_files:
        records = process_document(
            user_id       = user_id,
            document_id   = filepath.stem,
            document_text = filepath.read_text(encoding="utf-8"),
            embedder      = embedder,
            store         = store,
            metadata      = {"filename": filepath.name, "title": filepath.name},
            target_tokens = target_tokens,
        )
        counts[filepath.name] = len(records)

    log.info("Ingestion complete — %d chunks from %d document(s)",
             sum(counts.values()), len(counts))
    return counts
