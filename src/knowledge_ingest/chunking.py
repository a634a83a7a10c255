"""Paragraph-aware text chunking with size bounds and overlap."""

import logging
import re
from typing import List, Optional

from .policy import MAX_CHARS_PER_CHUNK, ChunkingPolicy

logger = logging.getLogger(__name__)

PARAGRAPH_SEPARATOR = "\n\n"
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_BREAK_CHARS = (".", "?", "!", "\n")


def chunk_text(text: str, policy: Optional[ChunkingPolicy] = None) -> List[str]:
    """
    Split normalized text into ordered chunks for embedding.

    Algorithm:
    1. Split into paragraphs on blank lines, dropping empty ones
    2. Pack paragraphs greedily into a chunk until the next one would
       push it past max_chars
    3. On overflow, keep the chunk if it meets min_chars and start the next
       one with the last overlap_chars of it
    4. Paragraphs longer than MAX_CHARS_PER_CHUNK go straight to
       split_large_text
    5. If nothing survived but the text is non-empty, emit it whole
    6. Re-split anything still above MAX_CHARS_PER_CHUNK

    Args:
        text: Normalized document text
        policy: Token bounds (defaults to ChunkingPolicy())

    Returns:
        List of chunk strings, each at most MAX_CHARS_PER_CHUNK long
    """
    policy = policy or ChunkingPolicy()
    min_chars = policy.min_chars
    max_chars = policy.max_chars
    overlap_chars = policy.overlap_chars

    logger.debug(
        f"[chunking] Options: min_chars={min_chars}, max_chars={max_chars}, "
        f"overlap_chars={overlap_chars}, max_chars_limit={MAX_CHARS_PER_CHUNK}"
    )

    paragraphs = [p.strip() for p in _PARAGRAPH_BREAK.split(text)]
    paragraphs = [p for p in paragraphs if p]
    logger.debug(f"[chunking] Found {len(paragraphs)} paragraphs")

    chunks: List[str] = []
    current = ""

    for paragraph in paragraphs:
        if len(paragraph) > MAX_CHARS_PER_CHUNK:
            logger.debug(
                f"[chunking] Large paragraph detected ({len(paragraph)} chars), splitting further"
            )
            _flush(chunks, current.strip(), min_chars)
            chunks.extend(split_large_text(paragraph, max_chars, overlap_chars))
            current = ""
            continue

        if current and len(current) + len(paragraph) > max_chars:
            _flush(chunks, current.strip(), min_chars, size=len(current))

            # Carry the tail of the previous chunk into the next one
            tail = current[-overlap_chars:] if overlap_chars > 0 else ""
            current = f"{tail}{PARAGRAPH_SEPARATOR}{paragraph}" if tail else paragraph
        elif current:
            current = f"{current}{PARAGRAPH_SEPARATOR}{paragraph}"
        else:
            current = paragraph

    _flush(chunks, current.strip(), min_chars)

    stripped = text.strip()
    if not chunks and stripped:
        logger.debug(f"[chunking] Created single chunk for short content of length {len(stripped)}")
        chunks.append(stripped)

    final_chunks: List[str] = []
    for chunk in chunks:
        if len(chunk) > MAX_CHARS_PER_CHUNK:
            logger.warning(f"[chunking] Chunk too large ({len(chunk)} chars), splitting further")
            final_chunks.extend(split_large_text(chunk, max_chars, overlap_chars))
        else:
            final_chunks.append(chunk)

    logger.info(
        f"[chunking] Split {len(text)} chars into {len(final_chunks)} chunks "
        f"(max_chars={max_chars}, overlap_chars={overlap_chars})"
    )
    return final_chunks


def _flush(chunks: List[str], chunk: str, min_chars: int, size: Optional[int] = None) -> None:
    # size lets the overflow path compare the untrimmed accumulated length
    size = len(chunk) if size is None else size
    if chunk and size >= min_chars:
        chunks.append(chunk)
        logger.debug(f"[chunking] Added chunk {len(chunks)}: {len(chunk)} chars")
    elif chunk:
        logger.debug(f"[chunking] Skipped chunk of length {size} (below minimum {min_chars})")


def split_large_text(text: str, max_chars: int, overlap_chars: int) -> List[str]:
    """
    Split text that is too long for one chunk, preferring sentence breaks.

    Scans forward in windows of max_chars. A window is shortened to end just
    after the latest '.', '?', '!' or newline inside it, provided that break
    lies past the window's midpoint. Consecutive windows overlap by
    overlap_chars, and each step advances at least one character.

    Args:
        text: Text to split
        max_chars: Maximum window size
        overlap_chars: Characters shared between consecutive windows

    Returns:
        Trimmed, non-empty pieces of text, each at most max_chars long
    """
    if max_chars <= 0:
        raise ValueError("max_chars must be greater than zero")

    chunks: List[str] = []
    start = 0
    length = len(text)

    while start < length:
        end = start + max_chars

        if end < length:
            break_point = max(text.rfind(char, start, end) for char in _BREAK_CHARS)
            if break_point > start + max_chars * 0.5:
                end = break_point + 1

        piece = text[start:end].strip()
        if piece:
            chunks.append(piece)
            logger.debug(f"[chunking] Split chunk: {len(piece)} chars at position {start}")

        start = max(start + 1, end - overlap_chars)

    return chunks


__all__ = ["chunk_text", "split_large_text", "PARAGRAPH_SEPARATOR"]
