"""Pairing chunk texts with positional and provenance metadata."""

import logging
import math
from datetime import datetime, timezone
from typing import List

from .policy import CHARS_PER_TOKEN, OwnerScope
from .schemas.ingestion import ChunkRecord

logger = logging.getLogger(__name__)


def estimate_tokens(text: str) -> int:
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def assemble_chunk_records(
    chunk_texts: List[str],
    file_name: str,
    file_type: str,
    file_size: int,
    owner: OwnerScope,
    file_hash: str,
) -> List[ChunkRecord]:
    """
    Build pre-embedding records from chunk texts.

    Centralized function to ensure consistent record shape across variants.

    Args:
        chunk_texts: Ordered chunk strings
        file_name: Declared file name
        file_type: Declared media type
        file_size: Declared size in bytes
        owner: Owner scope the records belong to
        file_hash: Content fingerprint of the source document

    Returns:
        One ChunkRecord per chunk, in input order
    """
    if not chunk_texts:
        logger.warning(f"[records] No chunks to assemble for {file_name}")
        return []

    processed_at = datetime.now(timezone.utc).isoformat()
    total = len(chunk_texts)

    records = [
        ChunkRecord(
            owner_kind=owner.kind,
            owner_id=owner.id,
            content=text,
            file_name=file_name,
            file_type=file_type,
            file_size=file_size,
            file_hash=file_hash,
            chunk_index=index,
            total_chunks=total,
            metadata={
                "original_file_name": file_name,
                "file_type": file_type,
                "file_size": file_size,
                "chunk_index": index,
                "total_chunks": total,
                "processed_at": processed_at,
                "token_estimate": estimate_tokens(text),
            },
        )
        for index, text in enumerate(chunk_texts)
    ]

    logger.debug(f"[records] Assembled {total} records for {file_name}")
    return records


__all__ = ["assemble_chunk_records", "estimate_tokens"]
