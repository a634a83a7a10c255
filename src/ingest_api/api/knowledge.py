from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import JSONResponse
from typing import Optional
import logging

from knowledge_ingest import KnowledgeIngestionService, OwnerKind, OwnerScope
from ingest_api.dependencies import get_ingestion_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["knowledge"])

COACH_AI = "coach-ai"


def _envelope(status_code: int, success: bool, message: Optional[str] = None, **payload) -> JSONResponse:
    content = {"success": success}
    if message is not None:
        content["message"] = message
    content.update(payload)
    return JSONResponse(status_code=status_code, content=content)


def _owner_for(owner_id: str, knowledge_type: Optional[str]) -> OwnerScope:
    if knowledge_type == COACH_AI:
        return OwnerScope.company(owner_id)
    return OwnerScope.agent(owner_id)


@router.post("/ingest-document")
async def ingest_document(
    file: Optional[UploadFile] = File(None),
    agent_id: Optional[str] = Form(None, alias="agentId"),
    company_id: Optional[str] = Form(None, alias="companyId"),
    knowledge_type: Optional[str] = Form(None, alias="knowledgeType"),
    service: KnowledgeIngestionService = Depends(get_ingestion_service),
):
    """
    Ingest an uploaded document into an agent's or a company's knowledge base
    """
    if file is None:
        return _envelope(status.HTTP_400_BAD_REQUEST, False, "No file uploaded")

    is_coach_ai = knowledge_type == COACH_AI or bool(company_id)
    if is_coach_ai and not company_id:
        return _envelope(
            status.HTTP_400_BAD_REQUEST,
            False,
            "Company ID is required for Coach AI knowledge processing",
        )
    if not is_coach_ai and not agent_id:
        return _envelope(
            status.HTTP_400_BAD_REQUEST,
            False,
            "Agent ID is required for regular agent knowledge processing",
        )

    owner = OwnerScope.company(company_id) if is_coach_ai else OwnerScope.agent(agent_id)

    try:
        file_data = await file.read()
        file_size = file.size if file.size is not None else len(file_data)
        file_type = file.content_type or "application/octet-stream"

        logger.info(
            f"[api] Processing file: {file.filename} ({file_size} bytes)",
            extra={"file_type": file_type, "owner_kind": owner.kind.value, "owner_id": owner.id},
        )

        result = await service.ingest_document(
            file_data,
            file.filename,
            file_type,
            file_size,
            owner,
        )
    except Exception as e:
        logger.error(f"[api] Document ingestion error: {e}", exc_info=True)
        return _envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            False,
            str(e) or "Internal server error",
        )

    status_code = status.HTTP_200_OK if result.success else status.HTTP_400_BAD_REQUEST
    return JSONResponse(status_code=status_code, content=result.model_dump(mode="json", by_alias=True))


async def _stats_response(service: KnowledgeIngestionService, owner: OwnerScope) -> JSONResponse:
    try:
        stats = await service.get_processing_stats(owner)
    except Exception as e:
        logger.error(f"[api] Error getting processing stats: {e}")
        return _envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            False,
            str(e) or "Internal server error",
        )
    return _envelope(
        status.HTTP_200_OK,
        True,
        stats=stats.model_dump(mode="json", by_alias=True),
    )


async def _delete_response(
    service: KnowledgeIngestionService,
    owner: OwnerScope,
    file_hash: str,
    message: str,
) -> JSONResponse:
    try:
        await service.delete_file_chunks(owner, file_hash)
    except Exception as e:
        logger.error(f"[api] Error deleting file chunks: {e}")
        return _envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            False,
            str(e) or "Internal server error",
        )
    return _envelope(status.HTTP_200_OK, True, message)


@router.get("/processing-stats/{owner_id}")
async def processing_stats(
    owner_id: str,
    knowledge_type: Optional[str] = Query(None, alias="type"),
    service: KnowledgeIngestionService = Depends(get_ingestion_service),
):
    """Processing statistics for an agent, or a company with ?type=coach-ai"""
    return await _stats_response(service, _owner_for(owner_id, knowledge_type))


@router.delete("/delete-file/{owner_id}/{file_hash}")
async def delete_file(
    owner_id: str,
    file_hash: str,
    knowledge_type: Optional[str] = Query(None, alias="type"),
    service: KnowledgeIngestionService = Depends(get_ingestion_service),
):
    """Delete every chunk of one file, matched by content hash"""
    owner = _owner_for(owner_id, knowledge_type)
    message = (
        "Coach AI file chunks deleted successfully"
        if owner.kind == OwnerKind.COMPANY
        else "File chunks deleted successfully"
    )
    return await _delete_response(service, owner, file_hash, message)


@router.get("/coach-ai/processing-stats/{company_id}")
async def coach_ai_processing_stats(
    company_id: str,
    service: KnowledgeIngestionService = Depends(get_ingestion_service),
):
    return await _stats_response(service, OwnerScope.company(company_id))


@router.delete("/coach-ai/delete-file/{company_id}/{file_hash}")
async def coach_ai_delete_file(
    company_id: str,
    file_hash: str,
    service: KnowledgeIngestionService = Depends(get_ingestion_service),
):
    return await _delete_response(
        service,
        OwnerScope.company(company_id),
        file_hash,
        "Coach AI file chunks deleted successfully",
    )
