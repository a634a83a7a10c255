from fastapi import Request

from knowledge_ingest import KnowledgeIngestionService


def get_ingestion_service(request: Request) -> KnowledgeIngestionService:
    """Dependency returning the service built at startup"""
    return request.app.state.ingestion_service
