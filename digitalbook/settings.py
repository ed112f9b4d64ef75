"""Application configuration management."""

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


@dataclass
class Settings:
    """Application settings loaded from environment."""

    # App
    app_name: str = "Digital Book"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"  # development, staging, production

    # Book backend
    api_base_url: str = "http://localhost:3000"
    api_token: str = ""
    request_timeout_seconds: float = 25.0  # cold-started backends answer slowly
    default_book_source: str = "manual"

    # Attachments and PDF import
    attachment_max_files: int = 5
    attachment_max_size_mb: int = 10
    pdf_max_size_mb: int = 10

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # json or text

    def __post_init__(self):
        """Validate settings after initialization."""
        self.api_base_url = self.api_base_url.rstrip("/")
        if self.log_format not in ("json", "text"):
            raise ValueError("LOG_FORMAT must be 'json' or 'text'")
        if self.request_timeout_seconds <= 0:
            raise ValueError("REQUEST_TIMEOUT_SECONDS must be positive")
        if self.environment == "production":
            if not self.api_base_url.startswith("https://"):
                raise ValueError("DIGITALBOOK_API_BASE must use https in production")

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.environment == "development"


def load_settings_from_env() -> Settings:
    """Load settings from environment variables (and a local .env file)."""
    load_dotenv()

    def get_bool(key: str, default: bool = False) -> bool:
        value = os.getenv(key, str(default)).lower()
        return value in ("true", "1", "yes")

    def get_int(key: str, default: int) -> int:
        return int(os.getenv(key, str(default)))

    def get_float(key: str, default: float) -> float:
        return float(os.getenv(key, str(default)))

    return Settings(
        # App
        app_name=os.getenv("APP_NAME", "Digital Book"),
        app_version=os.getenv("APP_VERSION", "0.1.0"),
        debug=get_bool("DEBUG", False),
        environment=os.getenv("ENVIRONMENT", "development"),

        # Book backend
        api_base_url=os.getenv("DIGITALBOOK_API_BASE", "http://localhost:3000"),
        api_token=os.getenv("DIGITALBOOK_API_TOKEN", ""),
        request_timeout_seconds=get_float("REQUEST_TIMEOUT_SECONDS", 25.0),
        default_book_source=os.getenv("DEFAULT_BOOK_SOURCE", "manual"),

        # Attachments and PDF import
        attachment_max_files=get_int("ATTACHMENT_MAX_FILES", 5),
        attachment_max_size_mb=get_int("ATTACHMENT_MAX_SIZE_MB", 10),
        pdf_max_size_mb=get_int("PDF_MAX_SIZE_MB", 10),

        # Logging
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_format=os.getenv("LOG_FORMAT", "json"),
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings_from_env()
