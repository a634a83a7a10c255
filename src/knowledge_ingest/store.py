"""Persistence of knowledge records, keyed by owner scope and content hash."""

import logging
from typing import List, Protocol
from uuid import uuid4

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .models import KnowledgeChunk
from .policy import OwnerScope
from .schemas.ingestion import KnowledgeRecord, StoredFileMetadata
from .utils.errors import StoreError

logger = logging.getLogger(__name__)

DUPLICATE_LOOKUP_LIMIT = 5

# Drivers raise connection failures (refused, reset, timed out) as OSError
# without SQLAlchemy wrapping them
STORE_FAILURES = (SQLAlchemyError, OSError)


class KnowledgeRecordStore(Protocol):
    async def find_by_fingerprint(self, owner: OwnerScope, file_hash: str) -> List[StoredFileMetadata]: ...

    async def find_by_name(self, owner: OwnerScope, file_name: str) -> List[StoredFileMetadata]: ...

    async def insert_many(self, records: List[KnowledgeRecord]) -> List[KnowledgeRecord]: ...

    async def delete_by_fingerprint(self, owner: OwnerScope, file_hash: str) -> int: ...

    async def select_all_metadata(self, owner: OwnerScope) -> List[StoredFileMetadata]: ...


def _owned_by(owner: OwnerScope):
    return (
        KnowledgeChunk.owner_kind == owner.kind,
        KnowledgeChunk.owner_id == owner.id,
    )


def _to_record(row: KnowledgeChunk) -> KnowledgeRecord:
    return KnowledgeRecord(
        id=row.id,
        owner_kind=row.owner_kind,
        owner_id=row.owner_id,
        content=row.content,
        embedding=row.embedding or [],
        file_name=row.file_name,
        file_type=row.file_type,
        file_size=row.file_size,
        file_hash=row.file_hash,
        chunk_index=row.chunk_index,
        total_chunks=row.total_chunks,
        metadata=row.chunk_metadata or {},
        created_at=row.created_at,
    )


class KnowledgeStore:
    """Knowledge records in the ``knowledge_chunks`` table via async SQLAlchemy"""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def _metadata_query(self, stmt, action: str) -> List[StoredFileMetadata]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return [
                    StoredFileMetadata(file_name=name, file_size=size, created_at=created_at)
                    for name, size, created_at in result.all()
                ]
        except STORE_FAILURES as e:
            logger.error(f"[store] Failed to {action}: {e}")
            raise StoreError(f"Failed to {action}: {e}") from e

    async def find_by_fingerprint(self, owner: OwnerScope, file_hash: str) -> List[StoredFileMetadata]:
        stmt = (
            select(KnowledgeChunk.file_name, KnowledgeChunk.file_size, KnowledgeChunk.created_at)
            .where(*_owned_by(owner), KnowledgeChunk.file_hash == file_hash)
            .limit(DUPLICATE_LOOKUP_LIMIT)
        )
        return await self._metadata_query(stmt, "look up chunks by hash")

    async def find_by_name(self, owner: OwnerScope, file_name: str) -> List[StoredFileMetadata]:
        stmt = (
            select(KnowledgeChunk.file_name, KnowledgeChunk.file_size, KnowledgeChunk.created_at)
            .where(*_owned_by(owner), KnowledgeChunk.file_name == file_name)
            .limit(DUPLICATE_LOOKUP_LIMIT)
        )
        return await self._metadata_query(stmt, "look up chunks by file name")

    async def select_all_metadata(self, owner: OwnerScope) -> List[StoredFileMetadata]:
        stmt = select(
            KnowledgeChunk.file_name, KnowledgeChunk.file_size, KnowledgeChunk.created_at
        ).where(*_owned_by(owner))
        return await self._metadata_query(stmt, "get processing stats")

    async def insert_many(self, records: List[KnowledgeRecord]) -> List[KnowledgeRecord]:
        """
        Insert embedded records in a single transaction.

        Returns:
            The stored records, with ids and creation timestamps

        Raises:
            StoreError: If the insert fails; nothing is written
        """
        if not records:
            return []

        rows = [
            KnowledgeChunk(
                id=str(uuid4()),
                owner_kind=record.owner_kind,
                owner_id=record.owner_id,
                content=record.content,
                embedding=list(record.embedding),
                file_name=record.file_name,
                file_type=record.file_type,
                file_size=record.file_size,
                file_hash=record.file_hash,
                chunk_index=record.chunk_index,
                total_chunks=record.total_chunks,
                chunk_metadata=dict(record.metadata),
            )
            for record in records
        ]

        try:
            async with self._session_factory() as session:
                session.add_all(rows)
                # created_at comes back through RETURNING (eager_defaults)
                await session.commit()
        except STORE_FAILURES as e:
            logger.error(f"[store] Failed to store knowledge chunks: {e}")
            raise StoreError(f"Failed to store knowledge chunks: {e}") from e

        logger.info(f"[store] Stored {len(rows)} knowledge chunks")
        return [_to_record(row) for row in rows]

    async def delete_by_fingerprint(self, owner: OwnerScope, file_hash: str) -> int:
        stmt = delete(KnowledgeChunk).where(*_owned_by(owner), KnowledgeChunk.file_hash == file_hash)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                await session.commit()
        except STORE_FAILURES as e:
            logger.error(f"[store] Failed to delete file chunks: {e}")
            raise StoreError(f"Failed to delete file chunks: {e}") from e

        logger.info(
            f"[store] Deleted {result.rowcount} chunks",
            extra={"owner_id": owner.id, "file_hash": file_hash[:16]},
        )
        return result.rowcount


__all__ = ["KnowledgeRecordStore", "KnowledgeStore", "DUPLICATE_LOOKUP_LIMIT", "STORE_FAILURES"]
