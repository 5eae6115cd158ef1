"""Shared configuration for all services."""
from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # MongoDB Configuration
    mongo_url: str = "mongodb://localhost:27017"
    mongo_db_name: str = "blog"
    mongo_create_indexes: bool = True
    article_category_index: str = "category_published_created_at"

    # Redis Configuration
    redis_url: str = "redis://localhost:6379"
    redis_session_prefix: str = "session"
    redis_session_channel: str = "session_updates"
    session_max_ttl: int = 3600  # seconds

    # Auth provider (Identity Toolkit REST API)
    auth_base_url: str = "https://identitytoolkit.googleapis.com/v1"
    auth_api_key: str = ""
    auth_timeout: int = 10
    admin_emails: List[str] = ["admin@example.com"]

    # Site
    site_name: str = "My Blog"
    site_description: str = "A blog about programming and web development"
    site_base_url: str = "http://localhost:3000"
    robots_crawl_delay: int = 1

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    log_level: str = "INFO"

    # WebSocket Configuration
    ws_heartbeat_interval: int = 30

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
