"""
Configuration management using Pydantic Settings.
Loads settings from environment variables and .env files.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class OllamaSettings(BaseSettings):
    """Local Ollama backend settings."""

    model_config = SettingsConfigDict(env_prefix="OLLAMA_")

    base_url: str = Field(default="http://localhost:11434", description="Ollama server URL")
    model: str = Field(
        default="qwen2.5:3b-instruct",
        description="Default model used when the host does not supply one",
    )
    chat_timeout: int = Field(default=120, description="Chat request timeout in seconds")
    health_check_timeout: int = Field(default=2, description="Health check timeout in seconds")
    list_models_timeout: int = Field(default=10, description="Model listing timeout in seconds")


class ReportSettings(BaseSettings):
    """Report generation settings."""

    model_config = SettingsConfigDict(env_prefix="REPORT_")

    locale: str = Field(default="ko", description="Locale used for date fallbacks in titles")

    @field_validator("locale")
    @classmethod
    def validate_locale(cls, v: str) -> str:
        allowed = {"ko", "en"}
        if v.lower() not in allowed:
            raise ValueError(f"locale must be one of {allowed}")
        return v.lower()


class StorageSettings(BaseSettings):
    """Durable key-value storage for preferences and usage statistics."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: str = Field(default="~/.openklaw", description="Directory holding stored JSON")
    settings_key: str = Field(default="openklaw_settings", description="Preference namespace key")
    stats_key: str = Field(default="openklaw_stats", description="Usage statistics namespace key")


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="openklaw", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/staging/production)")
    debug: bool = Field(default=True, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # Server
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")

    # Templates
    templates_file: Optional[str] = Field(
        default=None,
        description="Path to a report template catalog (defaults to the bundled one)",
    )

    # Sub-settings
    ollama: OllamaSettings = Field(default_factory=OllamaSettings)
    report: ReportSettings = Field(default_factory=ReportSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        allowed = {"development", "staging", "production"}
        if v.lower() not in allowed:
            raise ValueError(f"app_env must be one of {allowed}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


settings = get_settings()
