"""Knowledge ingestion package - validation, dedup, extraction, chunking and storage."""

from .utils import (
    setup_logging,
    KnowledgeIngestError,
    ValidationError,
    UnsupportedFileType,
    ImageFileRejected,
    FileTooLarge,
    ExtractionError,
    EmbeddingError,
    StoreError,
)
from .policy import (
    CHARS_PER_TOKEN,
    MAX_CHARS_PER_CHUNK,
    OwnerKind,
    OwnerScope,
    ChunkingPolicy,
    ValidationPolicy,
)
from .validation import validate_file
from .dedup import generate_file_hash, check_for_duplicate
from .extraction import extract_text, remove_image_references
from .chunking import chunk_text, split_large_text
from .records import assemble_chunk_records
from .embeddings import EmbeddingGenerator, OpenAIEmbedder, embed_records
from .store import KnowledgeRecordStore, KnowledgeStore
from .schemas import ChunkRecord, KnowledgeRecord, IngestionResult, ProcessingStats
from .services import KnowledgeIngestionService
from .config import Settings, settings

__version__ = "0.1.0"
__all__ = [
    "setup_logging",
    "KnowledgeIngestError",
    "ValidationError",
    "UnsupportedFileType",
    "ImageFileRejected",
    "FileTooLarge",
    "ExtractionError",
    "EmbeddingError",
    "StoreError",
    "CHARS_PER_TOKEN",
    "MAX_CHARS_PER_CHUNK",
    "OwnerKind",
    "OwnerScope",
    "ChunkingPolicy",
    "ValidationPolicy",
    "validate_file",
    "generate_file_hash",
    "check_for_duplicate",
    "extract_text",
    "remove_image_references",
    "chunk_text",
    "split_large_text",
    "assemble_chunk_records",
    "EmbeddingGenerator",
    "OpenAIEmbedder",
    "embed_records",
    "KnowledgeRecordStore",
    "KnowledgeStore",
    "ChunkRecord",
    "KnowledgeRecord",
    "IngestionResult",
    "ProcessingStats",
    "KnowledgeIngestionService",
    "Settings",
    "settings",
]
