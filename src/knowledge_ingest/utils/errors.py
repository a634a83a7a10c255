"""Shared error definitions for knowledge ingestion."""


class KnowledgeIngestError(Exception):
    """Base exception for knowledge ingestion."""
    pass


class ValidationError(KnowledgeIngestError):
    """Uploaded file failed type or size validation."""
    pass


class UnsupportedFileType(ValidationError):
    """Media type is not on the supported allow-list."""
    pass


class ImageFileRejected(ValidationError):
    """Image uploads are refused by this deployment."""
    pass


class FileTooLarge(ValidationError):
    """File exceeds the configured size ceiling."""
    pass


class ExtractionError(KnowledgeIngestError):
    """Text could not be extracted from the document."""
    pass


class EmbeddingError(KnowledgeIngestError):
    """Embedding generation failed for a chunk."""
    pass


class StoreError(KnowledgeIngestError):
    """Knowledge store query or write failed."""
    pass
