import logging

from pydantic import AliasChoices, Field, ValidationError
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # MONGODB_URI is still read so older deployments keep working
    database_url: str = Field(validation_alias=AliasChoices("DATABASE_URL", "MONGODB_URI"))
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"
    log_file: str | None = None
    max_upload_mb: int = 5
    history_limit: int = 10
    cors_origins: list[str] = ["*"]
    db_connect_timeout: int = 30  # seconds

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def load_settings(**overrides) -> Settings:
    """Build settings from the environment, exiting if no database URL is set."""
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        missing = [e["loc"][0] for e in exc.errors() if e["type"] == "missing"]
        if missing:
            logger.error("DATABASE_URL environment variable is not set!")
            raise SystemExit(1)
        raise
