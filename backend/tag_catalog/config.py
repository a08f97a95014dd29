from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="APP_",
        extra="ignore",
        case_sensitive=False,
    )

    # Application
    debug: bool = False
    log_level: str = "INFO"

    # API
    api_prefix: str = "/api"
    cors_origins: list[str] = [
        "http://localhost:5173",
        "https://suno.rsdaly.com",
    ]

    cors_origin_regex: str | None = None
    trusted_hosts: list[str] = ["*"]
    root_path: str = ""

    # Storage
    storage_backend: Literal["sqlite", "supabase"] = "sqlite"
    sqlite_path: str = "suno_tags.db"
    sqlite_busy_timeout_seconds: float = 5.0

    # Supabase (only used when storage_backend == "supabase")
    supabase_url: str | None = None
    supabase_service_role_key: str | None = None
    supabase_tags_table: str = "tags"

    # OpenAI
    openai_api_key: str | None = None
    classifier_model: str = "gpt-5-nano"
    classifier_model_reasoning: str | None = "low"
    classifier_answer_format: Literal["index", "label"] = "index"
    classifier_timeout_seconds: float = 30.0  # Hard bound on one classification call
    classifier_max_retries: int = 1


settings = Settings()
