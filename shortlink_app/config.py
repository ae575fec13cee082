from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = True

    # Application
    app_name: str = "Short Link Service"
    app_version: str = "1.0.0"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    base_url: str = "http://127.0.0.1:8000"

    # Record store
    store_backend: str = "sql"  # Options: "sql", "memory"
    database_url: str = "sqlite:///./shortlinks.db"

    # Short ID allocation
    short_id_length: int = 8
    short_id_min_length: int = 6  # Accepted range on the redirect path
    short_id_max_length: int = 10
    max_allocation_attempts: int = 5

    # URL validation. None means "restricted in production only"
    restrict_private_hosts: Optional[bool] = None

    # Redirect cache
    cache_backend: str = "memory"  # Options: "memory", "redis", "null"
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl: int = 3600  # Cache TTL in seconds (1 hour)
    cache_check_period: int = 120  # Expired-entry sweep interval in seconds
    cache_lock_stripes: int = 16

    # Visit recording on cache hits
    visit_dispatch_mode: str = "background"  # Options: "background", "inline"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    log_file: Optional[str] = None

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def restricted_mode(self) -> bool:
        """Whether the URL validator blocks loopback and private hosts."""
        if self.restrict_private_hosts is not None:
            return self.restrict_private_hosts
        return self.environment.lower() == "production"


# Create settings instance
settings = Settings()
