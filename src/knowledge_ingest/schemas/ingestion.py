"""Pydantic payloads passed between pipeline stages and returned to callers."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from knowledge_ingest.policy import OwnerKind, OwnerScope


class ChunkRecord(BaseModel):
    """A chunk with its provenance, ready for embedding."""

    model_config = ConfigDict(frozen=True)

    owner_kind: OwnerKind
    owner_id: str
    content: str
    file_name: str
    file_type: str
    file_size: int
    file_hash: str
    chunk_index: int
    total_chunks: int
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def owner(self) -> OwnerScope:
        return OwnerScope(self.owner_kind, self.owner_id)

    def with_embedding(self, embedding: List[float]) -> "KnowledgeRecord":
        fields = self.model_dump(include=set(ChunkRecord.model_fields))
        return KnowledgeRecord(**fields, embedding=embedding)


class KnowledgeRecord(ChunkRecord):
    """An embedded chunk as written to, or read back from, the store."""

    embedding: List[float]
    id: Optional[str] = None
    created_at: Optional[datetime] = None


class StoredFileMetadata(BaseModel):
    """Per-row projection used for processing statistics."""

    file_name: str
    file_size: int
    created_at: Optional[datetime] = None


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IngestionResult(_CamelModel):
    """Outcome of ingesting one document."""

    success: bool
    chunks: List[KnowledgeRecord] = Field(default_factory=list)
    total_chunks: int = 0
    is_duplicate: bool = False
    message: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "chunks": [],
                "totalChunks": 3,
                "isDuplicate": False,
                "message": "Successfully processed 3 chunks from handbook.pdf",
            }
        }
    )


class ProcessingStats(_CamelModel):
    """Aggregate figures for everything an owner has ingested."""

    total_files: int = 0
    total_chunks: int = 0
    total_size: int = 0
    last_processed: Optional[datetime] = None


__all__ = [
    "ChunkRecord",
    "KnowledgeRecord",
    "StoredFileMetadata",
    "IngestionResult",
    "ProcessingStats",
]
