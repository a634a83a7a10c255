"""Services for knowledge ingestion."""

from .ingestion import KnowledgeIngestionService

__all__ = ["KnowledgeIngestionService"]
