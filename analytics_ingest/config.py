from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
import structlog

log = structlog.get_logger()

DEFAULT_API_KEY = "default-api-key-change-in-production"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    SERVICE_PORT: int = 8080
    LOG_JSON: bool = True
    MAX_PAYLOAD_SIZE: int = 65536
    # SQLAlchemy URL of the relational store
    DATABASE_URL: str = "sqlite:///./analytics.db"
    # Shared secret expected in the X-API-Key header
    API_KEY: str = DEFAULT_API_KEY
    # In-memory payload log
    PAYLOAD_LOG_ENABLED: bool = True
    PAYLOAD_LOG_MAX_SIZE: int = Field(default=1000, ge=1)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def warn_if_insecure_api_key(settings: Settings) -> bool:
    """
    Warn loudly when the service runs with the well-known default API key.

    Returns:
        True if the default key is in use
    """
    if settings.API_KEY != DEFAULT_API_KEY:
        return False

    log.warning("***************************************************************")
    log.warning("config.insecure_api_key", message="Using default API key! This is NOT secure for production!")
    log.warning("config.insecure_api_key", message="Please set the API_KEY environment variable to a secure value.")
    log.warning("***************************************************************")
    return True
