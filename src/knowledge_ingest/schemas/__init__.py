from .ingestion import (
    ChunkRecord,
    KnowledgeRecord,
    StoredFileMetadata,
    IngestionResult,
    ProcessingStats,
)

__all__ = [
    "ChunkRecord",
    "KnowledgeRecord",
    "StoredFileMetadata",
    "IngestionResult",
    "ProcessingStats",
]
