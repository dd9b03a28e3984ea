"""
Application settings.
Values come from environment variables, optionally loaded from a .env file.
"""
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict


def find_and_load_env_file() -> Optional[str]:
    """Load the first .env found in the working directory or its parents."""
    current = Path.cwd().resolve()
    for _ in range(4):
        env_path = current / ".env"
        if env_path.exists():
            load_dotenv(env_path, override=False)
            return str(env_path)
        if current.parent == current:
            break
        current = current.parent
    return None


find_and_load_env_file()


class Settings(BaseSettings):
    """Service configuration."""

    APP_NAME: str = "Restaurant Service"

    # MongoDB
    MONGO_URL: str = "mongodb://localhost:27017"
    DB_NAME: str = "restaurant"
    # Multi-document transactions need a replica set or sharded cluster
    MONGO_TRANSACTIONS: bool = True

    # Bearer tokens
    SECRET_KEY: str
    ALGORITHM: str = "HS256"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"
    LOG_FILE: Optional[str] = None

    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        case_sensitive=True,
        extra="ignore",
    )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


settings = get_settings()
