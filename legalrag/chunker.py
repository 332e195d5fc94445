"""
legalrag/chunker.py
-------------------
Sentence-aligned document segmentation for the legal RAG ingestion pipeline.

Splits long, loosely structured extracted text into an ordered list of chunks
that each stay within an approximate token budget, so every chunk can be sent
to an embedding model on its own. Chunks always end on a sentence boundary:
sentences are packed greedily, left to right, and a sentence that alone
exceeds the budget becomes its own chunk rather than being cut.

Token counts are estimated (≈ 4 characters per token); no tokenizer is
loaded. Pass any `SizeEstimator` to swap in an exact one.

Pure and synchronous. Does no I/O and never raises on string input.
"""

import logging
import math
import re
from typing import Callable, List, Optional, Tuple

from typing_extensions import TypedDict

from legalrag.logging_config import get_logger

log = get_logger(__name__)

# ── Constants ──────────────────────────────────────────────────────────────────
CHARS_PER_TOKEN       = 4
DEFAULT_TARGET_TOKENS = 1000

# One or more terminators, optional closing quotes/brackets, then whitespace or
# end of text. The lookbehind anchors each match at the start of a terminator
# run so long runs ("......") are scanned once.
_SENTENCE_END = re.compile(r"(?<![.!?])[.!?]+[\"'”’)\]}»]*(?=\s|$)")
# ──────────────────────────────────────────────────────────────────────────────

SizeEstimator = Callable[[str], float]
Span = Tuple[int, int]


class ChunkInfo(TypedDict):
    """Per-chunk report used by the CLI and the HTTP service."""
    index:      int     # position in document order; doubles as chunk_index
    text:       str
    tokens:     float   # estimated size
    characters: int


def estimate_tokens_for_length(length: int) -> int:
    """Token estimate for a text of the given character length."""
    return math.ceil(length / CHARS_PER_TOKEN)


def estimate_tokens(text: str) -> int:
    """Rough token count: one token per CHARS_PER_TOKEN characters, rounded up."""
    return estimate_tokens_for_length(len(text))


# ── Sentence segmentation ──────────────────────────────────────────────────────

def _trimmed_span(text: str, start: int, end: int) -> Optional[Span]:
    piece = text[start:end]
    stripped = piece.strip()
    if not stripped:
        return None
    lead = len(piece) - len(piece.lstrip())
    return start + lead, start + lead + len(stripped)


def sentence_spans(text: str) -> List[Span]:
    """
    Locates every sentence in text.

    A sentence ends after `.`, `!` or `?` (a run of them counts once), plus
    any closing quotes or brackets, when followed by whitespace or the end
    of the text. Abbreviations such as "Mr." or "U.S.C." are not special
    cased. Whatever follows the last boundary is the final sentence.

    Args:
        text: Any string.

    Returns:
        Ordered (start, end) offsets into text, each trimmed of surrounding
        whitespace. Whitespace-only pieces are skipped.
    """
    spans: List[Span] = []
    start = 0

    for match in _SENTENCE_END.finditer(text):
        span = _trimmed_span(text, start, match.end())
        if span:
            spans.append(span)
        start = match.end()

    tail = _trimmed_span(text, start, len(text))
    if tail:
        spans.append(tail)

    return spans


def split_sentences(text: str) -> List[str]:
    """Returns the trimmed sentences of text, in order."""
    return [text[start:end] for start, end in sentence_spans(text)]


# ── Chunking ───────────────────────────────────────────────────────────────────

def _clamp_target(target_tokens: Optional[float]) -> float:
    """Maps unusable targets to 0, which yields one sentence per chunk."""
    if target_tokens is None or not math.isfinite(target_tokens) or target_tokens <= 0:
        log.debug("Target %r is not a positive finite number — clamping to 0", target_tokens)
        return 0
    return target_tokens


def split_into_chunks(
    text: str,
    target_tokens: Optional[float] = DEFAULT_TARGET_TOKENS,
    estimator: SizeEstimator = estimate_tokens,
) -> List[str]:
    """
    Splits text into sentence-aligned chunks of roughly target_tokens each.

    Sentences are accumulated greedily until the next one would push the
    estimate past the target; the chunk is then closed and the next one
    starts with that sentence. A single sentence larger than the target is
    emitted alone and unmodified.

    The size of a chunk is estimated on its sentences joined by single
    spaces, so the whitespace between sentences never moves a boundary.
    The returned chunk is the original slice of text, internal newlines
    and indentation included.

    Args:
        text:          Extracted document text.
        target_tokens: Approximate upper bound per chunk, in estimator units.
                       None, zero, negative or non-finite values mean one
                       sentence per chunk.
        estimator:     Size function applied to candidate chunk text.

    Returns:
        Non-empty, trimmed chunks in document order. Empty list for blank text.
    """
    source = text.strip()
    if not source:
        log.debug("split_into_chunks: empty text — nothing to chunk")
        return []

    target = _clamp_target(target_tokens)

    if estimator(source) <= target:
        log.debug("split_into_chunks: %d chars fit in one chunk", len(source))
        return [source]

    spans = sentence_spans(source)
    log.debug("split_into_chunks: %d chars → %d sentences", len(source), len(spans))

    by_length = estimator is estimate_tokens

    chunks:    List[str] = []
    first:     Optional[int] = None   # start offset of the open chunk
    last:      int = 0                # end offset of the open chunk
    sentences: List[str] = []         # sentences of the open chunk
    joined:    int = 0                # length of those sentences, single-space joined

    for start, end in spans:
        sentence = source[start:end]
        length   = joined + 1 + len(sentence) if sentences else len(sentence)

        if by_length:
            size = estimate_tokens_for_length(length)
        else:
            size = estimator(" ".join(sentences + [sentence]))

        if size <= target:
            if first is None:
                first = start
            sentences.append(sentence)
            joined, last = length, end
        elif first is not None:
            chunks.append(source[first:last])
            first, last = start, end
            sentences, joined = [sentence], len(sentence)
        else:
            # Oversized sentence with nothing open: emit it whole.
            chunks.append(sentence)

    if first is not None:
        chunks.append(source[first:last])

    if log.isEnabledFor(logging.DEBUG):
        for i, chunk in enumerate(chunks, start=1):
            log.debug("Chunk %d: %s tokens, %d characters", i, estimator(chunk), len(chunk))
    log.info("Split %d chars into %d chunk(s) (target=%s)", len(source), len(chunks), target)

    return chunks


def chunk_stats(
    chunks: List[str],
    estimator: SizeEstimator = estimate_tokens,
) -> List[ChunkInfo]:
    """Annotates chunks with their index, estimated tokens and character count."""
    return [
        ChunkInfo(index=i, text=chunk, tokens=estimator(chunk), characters=len(chunk))
        for i, chunk in enumerate(chunks)
    ]
