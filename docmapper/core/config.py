# Standard library imports
import os
from typing import Final, Optional
from dotenv import load_dotenv


class Settings:
    """
    Settings loaded from environment variables.

    Only the connection bootstrap reads these; repositories receive an
    explicit database handle and never consult settings themselves.
    """

    def __init__(self) -> None:
        # Load environment variables from .env file
        load_dotenv()

        # Database Configuration
        self.mongo_uri: Final[str] = os.getenv("MONGO_URI", "mongodb://localhost:27017")
        self.mongo_database_name: Final[str] = os.getenv("DB_NAME", "docmapper")

        # Applied to server selection and socket connect during startup only
        self.mongo_connect_timeout_ms: Final[int] = int(
            os.getenv("MONGO_CONNECT_TIMEOUT_MS", "10000")
        )


# Global settings instance (singleton pattern)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get settings (singleton pattern)

    Returns:
        Settings instance with all configuration values
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
