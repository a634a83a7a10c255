from datetime import datetime, timezone
import logging
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from knowledge_ingest import KnowledgeIngestionService, KnowledgeStore, OpenAIEmbedder, setup_logging
from knowledge_ingest.database import create_database, init_db
from ingest_api.api import knowledge
from ingest_api.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def create_app(settings: Settings = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        setup_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)
        logger.info("[api] Knowledge ingest API starting...")

        # Clients are built once here so missing configuration fails at startup
        engine, session_factory = create_database(settings)
        await init_db(engine)
        logger.info("[api] Database initialized")

        app.state.ingestion_service = KnowledgeIngestionService(
            store=KnowledgeStore(session_factory),
            embedder=OpenAIEmbedder(settings=settings),
            settings=settings,
        )
        yield
        # Shutdown
        logger.info("[api] Knowledge ingest API shutting down...")
        await engine.dispose()

    app = FastAPI(
        title="Knowledge Ingest API",
        description="Document ingestion into agent and Coach AI knowledge bases",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.started_at = time.monotonic()

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        return {
            "message": "Knowledge Ingest API v0.1.0",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "status": "success",
        }

    @app.get("/health")
    async def health():
        return {
            "status": "healthy",
            "uptime": time.monotonic() - app.state.started_at,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    # Include routers
    app.include_router(knowledge.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=default_settings.API_HOST, port=default_settings.API_PORT)
