"""Service orchestrating document ingestion for agents and companies."""

import logging
from typing import Optional

from knowledge_ingest.chunking import chunk_text
from knowledge_ingest.config import Settings, settings as default_settings
from knowledge_ingest.dedup import check_for_duplicate, generate_file_hash
from knowledge_ingest.embeddings import EmbeddingGenerator, embed_records
from knowledge_ingest.extraction import extract_text
from knowledge_ingest.policy import ChunkingPolicy, OwnerKind, OwnerScope, ValidationPolicy
from knowledge_ingest.records import assemble_chunk_records
from knowledge_ingest.schemas.ingestion import IngestionResult, ProcessingStats
from knowledge_ingest.store import KnowledgeRecordStore
from knowledge_ingest.utils.errors import EmbeddingError, KnowledgeIngestError
from knowledge_ingest.validation import validate_file

logger = logging.getLogger(__name__)

SHORT_TEXT_WARNING_CHARS = 100

_DUPLICATE_MESSAGES = {
    OwnerKind.AGENT: "This file has already been uploaded to this agent. Please choose a different file.",
    OwnerKind.COMPANY: (
        "This file has already been uploaded to your Coach AI knowledge base. "
        "Please choose a different file."
    ),
}


def _success_message(owner: OwnerScope, file_name: str, count: int) -> str:
    if owner.kind == OwnerKind.COMPANY:
        return f"Successfully processed {file_name} and created {count} knowledge chunks for your Coach AI."
    return f"Successfully processed {count} chunks from {file_name}"


def _failure_message(owner: OwnerScope, error: Exception) -> str:
    if owner.kind == OwnerKind.COMPANY:
        return f"Failed to process file: {error}"
    return str(error)


class KnowledgeIngestionService:
    """Runs validate → hash → dedup → extract → chunk → embed → store.

    The store and embedder are created once at startup and passed in.
    """

    def __init__(
        self,
        store: KnowledgeRecordStore,
        embedder: EmbeddingGenerator,
        settings: Optional[Settings] = None,
    ):
        self.store = store
        self.embedder = embedder
        self.settings = settings or default_settings

    async def ingest_document(
        self,
        file_data: bytes,
        file_name: str,
        file_type: str,
        file_size: int,
        owner: OwnerScope,
        chunking: Optional[ChunkingPolicy] = None,
    ) -> IngestionResult:
        """
        Ingest one uploaded document.

        Args:
            file_data: Raw file bytes
            file_name: Declared file name
            file_type: Declared media type
            file_size: Declared size in bytes
            owner: Agent or company the knowledge belongs to
            chunking: Chunking bounds (defaults from settings)

        Returns:
            IngestionResult; duplicates and pipeline failures are reported
            with success=False rather than raised
        """
        validation_policy = ValidationPolicy.for_owner(owner.kind, self.settings)
        chunking = chunking or ChunkingPolicy.from_settings(self.settings)

        logger.info(
            f"[ingest] Processing file: {file_name}",
            extra={
                "file_size": file_size,
                "file_type": file_type,
                "owner_kind": owner.kind.value,
                "owner_id": owner.id,
            },
        )

        try:
            validate_file(file_type, file_size, validation_policy)

            file_hash = generate_file_hash(file_data)

            if await check_for_duplicate(self.store, owner, file_hash, file_name):
                logger.warning(f"[ingest] Duplicate detected, blocking upload of {file_name}")
                return IngestionResult(
                    success=False,
                    is_duplicate=True,
                    message=_DUPLICATE_MESSAGES[owner.kind],
                )

            text = extract_text(file_data, file_type, validation_policy)
            logger.info(f"[ingest] Extracted text length: {len(text)} characters")
            if len(text) < SHORT_TEXT_WARNING_CHARS:
                logger.warning(
                    f"[ingest] Very short text extracted ({len(text)} chars). "
                    "This might indicate heavy image filtering or document issues."
                )

            chunk_texts = chunk_text(text, chunking)
            records = assemble_chunk_records(
                chunk_texts, file_name, file_type, file_size, owner, file_hash
            )

            embedded = await embed_records(
                self.embedder, records, concurrency=self.settings.EMBEDDING_CONCURRENCY
            )
            if records and not embedded:
                raise EmbeddingError(
                    f"Failed to generate embeddings for all {len(records)} chunks of {file_name}"
                )

            stored = await self.store.insert_many(embedded)

        except KnowledgeIngestError as e:
            logger.error(f"[ingest] Document ingestion error: {e}")
            return IngestionResult(success=False, message=_failure_message(owner, e))

        logger.info(f"[ingest] Stored {len(stored)} chunks for {file_name}")
        return IngestionResult(
            success=True,
            chunks=stored,
            total_chunks=len(stored),
            message=_success_message(owner, file_name, len(stored)),
        )

    async def get_processing_stats(self, owner: OwnerScope) -> ProcessingStats:
        """Summarize everything stored for an owner.

        Raises:
            StoreError: If the store query fails
        """
        rows = await self.store.select_all_metadata(owner)
        timestamps = [row.created_at for row in rows if row.created_at is not None]

        return ProcessingStats(
            total_files=len({row.file_name for row in rows}),
            total_chunks=len(rows),
            total_size=sum(row.file_size for row in rows),
            last_processed=max(timestamps) if timestamps else None,
        )

    async def delete_file_chunks(self, owner: OwnerScope, file_hash: str) -> int:
        """Delete every chunk of one file for an owner.

        Raises:
            StoreError: If the delete fails
        """
        deleted = await self.store.delete_by_fingerprint(owner, file_hash)
        logger.info(f"[ingest] Deleted {deleted} chunks for file {file_hash[:16]}...")
        return deleted


__all__ = ["KnowledgeIngestionService"]
