"""Application configuration using Pydantic settings."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # Application
    APP_NAME: str = "Sanctions Explorer"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # OpenSearch
    OPENSEARCH_URL: str = "http://localhost:9200"
    OPENSEARCH_TIMEOUT: float = 30.0
    SDN_INDEX: str = "sdn"
    PRESS_RELEASE_INDEX: str = "pr"
    BULK_TIMEOUT: str = "6s"
    BULK_CHUNK_SIZE: int = 500
    BULK_MAX_CHUNK_BYTES: int = 10 * 1024 * 1024

    # Search pagination
    DEFAULT_PAGE_SIZE: int = 50
    MAX_PAGE_SIZE: int = 1000

    # ETL files
    UPDATE_FILES_DIR: Path = Path("data/update_files")
    SDN_FILE: str = "sdn.json"
    NON_SDN_FILE: str = "non_sdn.json"
    SNAPSHOT_FILE: str = "transformed_combined.json"

    # Server
    HOST: str = "127.0.0.1"
    PORT: int = 8080

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:8080"]


settings = Settings()
