"""API-specific configuration extending the ingestion settings."""

from knowledge_ingest import Settings as IngestSettings


class Settings(IngestSettings):
    """API settings extending the shared ingestion configuration."""

    # ===== API SETTINGS =====
    API_HOST: str = "0.0.0.0"
    """API host address."""

    API_PORT: int = 3000
    """API port number."""

    CORS_ORIGINS: str = "*"
    """Comma-separated list of allowed CORS origins."""

    @property
    def cors_origins(self) -> list:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Singleton instance
settings = Settings()
