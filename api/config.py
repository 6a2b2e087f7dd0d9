"""
API configuration settings.
"""

from pydantic_settings import BaseSettings


class APIConfig(BaseSettings):
    """API configuration settings."""

    # API Settings
    api_title: str = "BookStore API"
    api_version: str = "1.0.0"
    api_description: str = """
    A REST API for managing books, backed by MongoDB.

    ## Features

    * **Books**: Create, read, replace and delete book records
    * **Caching**: Reads are served from Redis when possible; writes invalidate stale entries
    """
    api_prefix: str = "/api/books"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # CORS Settings
    cors_origins: list = ["*"]  # Configure appropriately for production
    cors_allow_credentials: bool = True
    cors_allow_methods: list = ["*"]
    cors_allow_headers: list = ["*"]

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "extra": "ignore"  # Ignore extra fields from .env
    }


# Global config instance
config = APIConfig()
