"""
app.py
------
Orchestration layer and command-line entry point for the legal document
chunker.

    extracted text → split_into_chunks() → chunk_stats() → JSON report

The report lists every chunk in document order with its index, estimated
token count and character count. The index is the chunk_index a downstream
embedding pipeline stores alongside each vector.

Usage:
    python app.py motion.txt            # default target (1000 tokens)
    python app.py motion.txt 250        # custom target
    cat motion.txt | python app.py      # read from stdin
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from legalrag.chunker        import chunk_stats, split_into_chunks
from legalrag.logging_config import get_logger

log = get_logger(__name__)

# ── Configuration ───────────────────────────────────────────────────────────────

TARGET_TOKENS  = 1000
PREVIEW_CHARS  = 100
PREVIEW_CHUNKS = 3

_USAGE = "usage: python app.py [FILE] [TARGET_TOKENS]"


# ── Chunking ────────────────────────────────────────────────────────────────────

def chunk_document(text: str, target_tokens: float = TARGET_TOKENS) -> Dict[str, Any]:
    """
    Chunks text and returns a serializable report.

    Returns:
        {"target_tokens": ..., "chunk_count": int, "chunks": [ChunkInfo, ...]}
    """
    chunks = chunk_stats(split_into_chunks(text, target_tokens))
    for info in chunks[:PREVIEW_CHUNKS]:
        log.debug("Chunk %d preview: %s…", info["index"], info["text"][:PREVIEW_CHARS])
    return {
        "target_tokens": target_tokens,
        "chunk_count":   len(chunks),
        "chunks":        chunks,
    }


def chunk_file(path: Path, target_tokens: float = TARGET_TOKENS) -> Dict[str, Any]:
    """
    Reads a UTF-8 text file and chunks its contents.

    Raises:
        FileNotFoundError: If path does not exist.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    log.info("Chunking %s (%d chars)", path.name, len(text))
    report = chunk_document(text, target_tokens)
    report["source"] = path.name
    return report


# ── Entry point ─────────────────────────────────────────────────────────────────

def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv

    if len(args) > 2:
        print(_USAGE, file=sys.stderr)
        return 2

    target: float = TARGET_TOKENS
    if len(args) == 2:
        try:
            target = float(args[1])
        except ValueError:
            print(f"[ERROR] target must be a number, got {args[1]!r}\n{_USAGE}", file=sys.stderr)
            return 2

    try:
        if args and args[0] != "-":
            report = chunk_file(Path(args[0]), target)
        else:
            report = chunk_document(sys.stdin.read(), target)
    except FileNotFoundError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    print(json.dumps(report, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
