"""Configuration management for DocVault."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    ENV: str = "local"
    SERVICE_NAME: str = "docvault"
    SERVICE_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # GCP Configuration
    GCP_PROJECT_ID: str = ""
    GCP_REGION: str = "europe-west1"

    # Object Store Configuration
    OBJECT_STORE_BACKEND: str = "local"  # "gcs" or "local"
    LOCAL_OBJECT_STORE_PATH: str = "data/objects"
    GCS_BUCKET_PREFIX: str = ""  # Bucket name = prefix + collection name
    DEFAULT_COLLECTION: str = "default"

    # Document Store Configuration
    DOCUMENT_STORE_BACKEND: str = "memory"  # "memory", "local" or "gcs"
    LOCAL_DOCUMENT_STORE_PATH: str = "data/documents"
    DOCUMENT_BUCKET_NAME: str = ""

    # Upload Constraints
    MAX_UPLOAD_MB: int = 50
    ALLOWED_UPLOAD_MIME_TYPES: str = ""  # Comma-separated, empty = allow all
    UPLOAD_CHUNK_SIZE_KB: int = 256  # One progress callback per chunk

    @property
    def allowed_mime_types(self) -> list[str] | None:
        """Parse ALLOWED_UPLOAD_MIME_TYPES into a list."""
        if not self.ALLOWED_UPLOAD_MIME_TYPES:
            return None
        return [mt.strip() for mt in self.ALLOWED_UPLOAD_MIME_TYPES.split(",")]

    @property
    def max_upload_bytes(self) -> int:
        """Convert MAX_UPLOAD_MB to bytes."""
        return self.MAX_UPLOAD_MB * 1024 * 1024

    @property
    def upload_chunk_size_bytes(self) -> int:
        """Convert UPLOAD_CHUNK_SIZE_KB to bytes."""
        return self.UPLOAD_CHUNK_SIZE_KB * 1024


# Singleton settings instance
settings = Settings()
