import os

# Configure the environment before any knowledge_ingest import builds settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("OPENAI_API_KEY", "sk-test-key")
os.environ.setdefault("LOG_JSON", "false")

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from knowledge_ingest import (
    EmbeddingError,
    KnowledgeIngestionService,
    KnowledgeStore,
    OwnerScope,
    Settings,
)
from knowledge_ingest.database import create_session_factory, init_db


class FakeEmbedder:
    """Deterministic embedder; fails for any text containing a marker."""

    def __init__(self, fail_on=()):
        self.fail_on = tuple(fail_on)
        self.calls = []

    async def embed(self, text):
        self.calls.append(text)
        if any(marker in text for marker in self.fail_on):
            raise EmbeddingError(f"Embedding failed for chunk starting {text[:10]!r}")
        return [float(len(text)), 1.0, 0.0]


@pytest.fixture
def test_settings():
    return Settings(
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        OPENAI_API_KEY="sk-test-key",
        EMBEDDING_CONCURRENCY=2,
    )


@pytest.fixture(scope="function")
async def engine():
    """In-memory SQLite engine shared across sessions of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def store(session_factory):
    return KnowledgeStore(session_factory)


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def service(store, embedder, test_settings):
    return KnowledgeIngestionService(store=store, embedder=embedder, settings=test_settings)


@pytest.fixture
def agent():
    return OwnerScope.agent("agent-1")


@pytest.fixture
def company():
    return OwnerScope.company("company-1")


@pytest.fixture
def make_service(store, test_settings):
    """Build a service around a custom embedder or store."""

    def _make(embedder=None, knowledge_store=None):
        return KnowledgeIngestionService(
            store=knowledge_store or store,
            embedder=embedder or FakeEmbedder(),
            settings=test_settings,
        )

    return _make


@pytest.fixture
def fake_embedder_cls():
    return FakeEmbedder
