"""Application configuration."""
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # MongoDB
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_db_name: str = "ai_interview_agent"
    mongodb_max_pool_size: int = 10
    mongodb_server_selection_timeout_ms: int = 5000
    db_connect_retries: int = 5
    db_connect_retry_delay: float = 5.0

    # JWT
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440
    refresh_token_expire_days: int = 7

    # Application
    app_name: str = "AI Interview Agent API"
    app_version: str = "1.0.0"
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Rate limiting (fixed window, per client address)
    rate_limit_window_seconds: int = 15 * 60
    rate_limit_max_requests: int = 100

    # AI
    openai_api_key: str = ""
    openai_model: str = "gpt-3.5-turbo"
    validate_openai_on_startup: bool = True

    @property
    def allowed_origins_list(self) -> List[str]:
        """Get allowed origins as a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Settings loaded from the environment, built once per process."""
    return Settings()
