# Standard library imports
import os
from typing import Final, Optional


class Settings:
    """
    Application settings loaded from environment variables.

    This class centralizes all configuration settings for the application.
    All settings are loaded from environment variables with sensible defaults.
    """

    def __init__(self) -> None:
        # Database Configuration
        self.mongo_uri: Final[str] = os.getenv("MONGO_URI", "mongodb://localhost:27017")
        self.mongo_database_name: Final[str] = os.getenv("MONGO_DB_NAME", "mongo_users")
        self.users_collection_name: Final[str] = os.getenv("MONGO_USERS_COLLECTION", "users")
        self.mongo_timeout_ms: Final[int] = int(os.getenv("MONGO_TIMEOUT_MS", "10000"))

        # User service configuration
        # "native" -> hand-built documents on the raw collection
        # "repository" -> User objects through UserRepository
        self.user_service_impl: Final[str] = os.getenv("USER_SERVICE_IMPL", "native").strip().lower()
        self.default_page_size: Final[int] = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))

        # Logging
        self.log_level: Final[str] = os.getenv("LOG_LEVEL", "INFO").upper()


# Global settings instance (singleton pattern)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings (singleton pattern)

    Returns:
        Settings instance with all configuration values
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
