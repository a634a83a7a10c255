"""Tests for the end-to-end ingestion pipeline."""

import hashlib

import pytest
from unittest.mock import AsyncMock

from knowledge_ingest import ChunkingPolicy, OwnerScope, StoreError

PPTX = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
MB = 1024 * 1024

HANDBOOK = (
    "Welcome to the company handbook. This document covers onboarding.\n\n"
    "Vacation policy: employees accrue two days per month of service.\n\n"
    "Expense policy: submit receipts within thirty days of purchase."
).encode("utf-8")

SMALL_CHUNKS = ChunkingPolicy(min_tokens=1, max_tokens=20, overlap_tokens=2)


async def _ingest(service, owner, data=HANDBOOK, file_name="handbook.txt", file_type="text/plain", **kwargs):
    return await service.ingest_document(data, file_name, file_type, len(data), owner, **kwargs)


@pytest.mark.asyncio
async def test_ingest_text_document(service, store, agent):
    result = await _ingest(service, agent, chunking=SMALL_CHUNKS)

    assert result.success is True
    assert result.is_duplicate is False
    assert result.total_chunks == len(result.chunks) == 3
    assert result.message == "Successfully processed 3 chunks from handbook.txt"

    file_hash = hashlib.sha256(HANDBOOK).hexdigest()
    assert all(chunk.file_hash == file_hash for chunk in result.chunks)
    assert all(chunk.id and chunk.embedding for chunk in result.chunks)
    assert [chunk.chunk_index for chunk in result.chunks] == [0, 1, 2]
    assert len(await store.find_by_fingerprint(agent, file_hash)) == 3


@pytest.mark.asyncio
async def test_company_success_message(service, company):
    result = await _ingest(service, company, chunking=SMALL_CHUNKS)

    assert result.success is True
    assert result.message == (
        "Successfully processed handbook.txt and created 3 knowledge chunks for your Coach AI."
    )


@pytest.mark.asyncio
async def test_default_chunking_keeps_short_document_whole(service, agent):
    result = await _ingest(service, agent)

    assert result.total_chunks == 1
    assert result.chunks[0].content == HANDBOOK.decode("utf-8")


@pytest.mark.asyncio
async def test_reupload_is_duplicate(service, embedder, agent):
    await _ingest(service, agent)
    calls_before = len(embedder.calls)

    result = await _ingest(service, agent)

    assert result.success is False
    assert result.is_duplicate is True
    assert result.total_chunks == 0
    assert result.message == (
        "This file has already been uploaded to this agent. Please choose a different file."
    )
    assert len(embedder.calls) == calls_before


@pytest.mark.asyncio
async def test_company_duplicate_message(service, company):
    await _ingest(service, company)

    result = await _ingest(service, company)

    assert result.is_duplicate is True
    assert "Coach AI knowledge base" in result.message


@pytest.mark.asyncio
async def test_same_name_different_content_is_duplicate(service, agent):
    await _ingest(service, agent)

    result = await _ingest(service, agent, data=b"Completely different content.")

    assert result.is_duplicate is True


@pytest.mark.asyncio
async def test_same_file_other_owner_is_accepted(service, agent):
    await _ingest(service, agent)

    result = await _ingest(service, OwnerScope.agent("agent-2"))

    assert result.success is True


@pytest.mark.asyncio
async def test_image_rejected_for_agent(service, agent):
    result = await _ingest(service, agent, data=b"\x89PNG", file_name="logo.png", file_type="image/png")

    assert result.success is False
    assert result.is_duplicate is False
    assert result.message.startswith("Image files are not supported")


@pytest.mark.asyncio
async def test_image_unsupported_for_company(service, company):
    result = await _ingest(service, company, data=b"\x89PNG", file_name="logo.png", file_type="image/png")

    assert result.success is False
    assert result.message.startswith("Failed to process file: Unsupported file type: image/png")


@pytest.mark.asyncio
async def test_declared_size_over_limit(service, agent):
    result = await service.ingest_document(
        HANDBOOK, "big.txt", "text/plain", 11 * MB, agent
    )

    assert result.success is False
    assert "exceeds the maximum allowed size of 10MB" in result.message


@pytest.mark.asyncio
async def test_powerpoint_disabled_for_agent(service, agent):
    result = await _ingest(service, agent, data=b"PK", file_name="deck.pptx", file_type=PPTX)

    assert result.success is False
    assert result.message == "PowerPoint processing is temporarily disabled. Please convert to text format."


@pytest.mark.asyncio
async def test_corrupt_document_reports_extraction_failure(service, company):
    result = await _ingest(
        service,
        company,
        data=b"not a docx",
        file_name="broken.docx",
        file_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    )

    assert result.success is False
    assert result.message.startswith("Failed to process file: Failed to process Word document")


@pytest.mark.asyncio
async def test_partial_embedding_failure_stores_survivors(make_service, fake_embedder_cls, agent):
    service = make_service(embedder=fake_embedder_cls(fail_on=["Vacation"]))

    result = await _ingest(service, agent, chunking=SMALL_CHUNKS)

    assert result.success is True
    assert result.total_chunks == 2
    assert [chunk.chunk_index for chunk in result.chunks] == [0, 2]
    assert all(chunk.total_chunks == 3 for chunk in result.chunks)


@pytest.mark.asyncio
async def test_all_embeddings_failing_fails_ingestion(make_service, fake_embedder_cls, store, agent):
    service = make_service(embedder=fake_embedder_cls(fail_on=["policy", "handbook"]))

    result = await _ingest(service, agent, chunking=SMALL_CHUNKS)

    assert result.success is False
    assert "Failed to generate embeddings" in result.message
    assert await store.select_all_metadata(agent) == []


@pytest.mark.asyncio
async def test_store_failure_reported(make_service, agent):
    failing_store = AsyncMock()
    failing_store.find_by_fingerprint.return_value = []
    failing_store.find_by_name.return_value = []
    failing_store.insert_many.side_effect = StoreError("Failed to store knowledge chunks: disk full")
    service = make_service(knowledge_store=failing_store)

    result = await _ingest(service, agent)

    assert result.success is False
    assert result.message == "Failed to store knowledge chunks: disk full"


@pytest.mark.asyncio
async def test_dedup_lookup_failure_does_not_block_upload(make_service, store, agent):
    """Test uploads proceed when the duplicate lookup itself fails."""
    flaky_store = AsyncMock(wraps=store)
    flaky_store.find_by_fingerprint.side_effect = StoreError("timeout")
    flaky_store.find_by_name.side_effect = StoreError("timeout")
    flaky_store.insert_many.side_effect = store.insert_many
    service = make_service(knowledge_store=flaky_store)

    result = await _ingest(service, agent)

    assert result.success is True
    assert result.total_chunks == 1


@pytest.mark.asyncio
async def test_unexpected_errors_propagate(make_service, agent):
    broken_store = AsyncMock()
    broken_store.find_by_fingerprint.return_value = []
    broken_store.find_by_name.return_value = []
    broken_store.insert_many.side_effect = RuntimeError("bug")
    service = make_service(knowledge_store=broken_store)

    with pytest.raises(RuntimeError, match="bug"):
        await _ingest(service, agent)


@pytest.mark.asyncio
async def test_unreachable_store_during_dedup_does_not_block_upload(make_service, store, agent):
    flaky_store = AsyncMock()
    flaky_store.find_by_fingerprint.side_effect = ConnectionResetError(104, "Connection reset by peer")
    flaky_store.find_by_name.side_effect = ConnectionResetError(104, "Connection reset by peer")
    flaky_store.insert_many.side_effect = store.insert_many
    service = make_service(knowledge_store=flaky_store)

    result = await _ingest(service, agent)

    assert result.success is True
    assert result.total_chunks == 1


@pytest.mark.asyncio
async def test_processing_stats(service, agent, company):
    await _ingest(service, agent, chunking=SMALL_CHUNKS)
    notes = b"Meeting notes for the quarterly planning session."
    await _ingest(service, agent, data=notes, file_name="notes.txt")
    await _ingest(service, company)

    stats = await service.get_processing_stats(agent)

    assert stats.total_files == 2
    assert stats.total_chunks == 4
    assert stats.total_size == 3 * len(HANDBOOK) + len(notes)
    assert stats.last_processed is not None


@pytest.mark.asyncio
async def test_processing_stats_empty(service, agent):
    stats = await service.get_processing_stats(agent)

    assert stats.total_files == 0
    assert stats.total_chunks == 0
    assert stats.total_size == 0
    assert stats.last_processed is None


@pytest.mark.asyncio
async def test_delete_file_chunks_allows_reupload(service, agent):
    first = await _ingest(service, agent, chunking=SMALL_CHUNKS)

    deleted = await service.delete_file_chunks(agent, first.chunks[0].file_hash)
    again = await _ingest(service, agent, chunking=SMALL_CHUNKS)

    assert deleted == 3
    assert again.success is True
    assert again.is_duplicate is False
