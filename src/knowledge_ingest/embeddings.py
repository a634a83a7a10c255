"""OpenAI embedding generation utilities."""

import asyncio
from typing import List, Optional, Protocol
import logging
from openai import AsyncOpenAI, APIError

from .config import Settings, settings as default_settings
from .schemas.ingestion import ChunkRecord, KnowledgeRecord
from .utils.errors import EmbeddingError

logger = logging.getLogger(__name__)


class EmbeddingGenerator(Protocol):
    async def embed(self, text: str) -> List[float]: ...


class OpenAIEmbedder:
    """Embeds one text per request with the OpenAI embeddings API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        settings: Optional[Settings] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        settings = settings or default_settings
        api_key = api_key or settings.OPENAI_API_KEY
        if client is None and not api_key:
            raise ValueError(
                "OPENAI_API_KEY not configured. "
                "Please set OPENAI_API_KEY environment variable"
            )

        self.model = model or settings.OPENAI_EMBEDDING_MODEL
        self.timeout = timeout if timeout is not None else settings.EMBEDDING_TIMEOUT
        self._client = client or AsyncOpenAI(api_key=api_key)

    async def embed(self, text: str) -> List[float]:
        """Generate an embedding for a single text.

        Raises:
            ValueError: If text is empty
            EmbeddingError: If the OpenAI API call fails
        """
        if not text:
            raise ValueError("Empty text cannot be embedded")

        try:
            logger.debug(
                "Calling OpenAI embeddings API",
                extra={"model": self.model, "total_chars": len(text)},
            )
            response = await self._client.embeddings.create(
                model=self.model,
                input=text,
                timeout=self.timeout,
            )
        except APIError as e:
            raise EmbeddingError(f"OpenAI API error: {type(e).__name__}: {str(e)}") from e

        if len(response.data) != 1:
            raise EmbeddingError(
                f"OpenAI API returned {len(response.data)} embeddings for 1 text"
            )
        return response.data[0].embedding


async def embed_records(
    embedder: EmbeddingGenerator,
    records: List[ChunkRecord],
    concurrency: int = 4,
) -> List[KnowledgeRecord]:
    """Embed records concurrently, dropping any that fail.

    Args:
        embedder: Embedding generator, one call per record
        records: Records to embed, in chunk order
        concurrency: Maximum requests in flight

    Returns:
        Embedded records in the same relative order as the input; a record
        whose embedding failed or timed out is omitted
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def _embed_one(record: ChunkRecord) -> Optional[KnowledgeRecord]:
        async with semaphore:
            try:
                embedding = await embedder.embed(record.content)
            except Exception as e:
                logger.error(
                    f"[embeddings] Error processing chunk {record.chunk_index}: {type(e).__name__}: {e}",
                    extra={"file_hash": record.file_hash[:16], "chunk_index": record.chunk_index},
                )
                return None
        return record.with_embedding(embedding)

    results = await asyncio.gather(*(_embed_one(record) for record in records))
    embedded = [record for record in results if record is not None]

    logger.info(
        f"[embeddings] Embedded {len(embedded)}/{len(records)} chunks",
        extra={"failed": len(records) - len(embedded)},
    )
    return embedded


__all__ = ["EmbeddingGenerator", "OpenAIEmbedder", "embed_records"]
