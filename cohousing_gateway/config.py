"""Configuration management using Pydantic Settings"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "cohousing-gateway"
    log_level: str = "INFO"

    # Computation defaults
    default_annual_rate: float = Field(default=0.07, ge=0.0)
    hybrid_equal_ratio: float = Field(default=0.5, ge=0.0, le=1.0)

    # Result cache
    cache_enabled: bool = True
    cache_ttl_seconds: float = 300.0
    cache_max_entries: int = Field(default=1024, ge=1)

    # Results sink (persistence collaborator)
    results_sink_url: str = "http://localhost:8002/results"

    # HTTP Client
    http_timeout_seconds: float = 5.0
    webhook_max_retries: int = 5
    webhook_backoff_base: float = 1.0  # Exponential backoff base in seconds


settings = Settings()
