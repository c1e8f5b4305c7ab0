"""
Configuration management for medreport.
Handles the Gemini credential, retry bounds, and logging settings.
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    debug: bool = False

    # API Keys (required - a missing key stops the process at startup)
    gemini_api_key: str = Field(..., min_length=1, description="GEMINI_API_KEY")

    # Model Endpoints
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-2.5-flash"

    # Generation behaviour
    enable_search_grounding: bool = False
    max_attempts: int = Field(3, ge=1)

    # Latency Thresholds (ms)
    llm_generation_threshold: int = 30000

    request_timeout: int = 60

    # Logging
    log_level: str = "INFO"
    enable_structured_logging: bool = True
    compliance_log_path: Optional[str] = None

    # HTTP
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()


class ModelConfig:
    """Model-specific configuration constants."""

    # Temperature settings (always 0.0 for deterministic output)
    TEMPERATURE = 0.0
    TOP_P = 1.0

    RESPONSE_MIME_TYPE = "application/json"

    # Role used for the system instruction turn
    SYSTEM_ROLE = "model"
    USER_ROLE = "user"
