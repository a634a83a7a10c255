from .errors import (
    KnowledgeIngestError,
    ValidationError,
    UnsupportedFileType,
    ImageFileRejected,
    FileTooLarge,
    ExtractionError,
    EmbeddingError,
    StoreError,
)
from .logging import setup_logging, JSONFormatter

__all__ = [
    "KnowledgeIngestError",
    "ValidationError",
    "UnsupportedFileType",
    "ImageFileRejected",
    "FileTooLarge",
    "ExtractionError",
    "EmbeddingError",
    "StoreError",
    "setup_logging",
    "JSONFormatter",
]
