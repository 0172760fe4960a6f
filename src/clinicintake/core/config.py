"""
Configuration management for Clinic-Intake.

This module provides centralized configuration using Pydantic Settings
for environment-based configuration management.
"""

from typing import Optional

import os
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    model_config = SettingsConfigDict(env_prefix="MONGO_")

    uri: str = Field(
        default="mongodb://localhost:27017", description="MongoDB connection URI"
    )
    db_name: str = Field(default="clinicintake", description="MongoDB database name")
    server_selection_timeout_ms: int = Field(
        default=15000, description="Server selection timeout in milliseconds"
    )

    @field_validator("uri")
    @classmethod
    def validate_mongo_uri(cls, v: str) -> str:
        """Validate MongoDB URI format."""
        if not v:
            raise ValueError("MongoDB URI is required. Please set MONGO_URI environment variable.")
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError(
                "MongoDB URI must start with 'mongodb://' or 'mongodb+srv://'"
            )
        return v


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(default="json", description="Log format (json or text)")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()


class FileStorageSettings(BaseSettings):
    """Report storage configuration settings."""

    model_config = SettingsConfigDict(env_prefix="FILE_")

    storage_type: str = Field(default="local", description="Storage type (local, azure)")
    storage_path: str = Field(default="./storage/reports", description="Local report storage path")

    @field_validator("storage_type")
    @classmethod
    def validate_storage_type(cls, v: str) -> str:
        """Validate storage type."""
        valid_types = ["local", "azure"]
        if v.lower() not in valid_types:
            raise ValueError(f"Storage type must be one of: {valid_types}")
        return v.lower()


class AzureBlobSettings(BaseSettings):
    """Azure Blob Storage configuration settings."""

    model_config = SettingsConfigDict(env_prefix="AZURE_BLOB_")

    connection_string: str = Field(default="", description="Azure Storage Connection String")
    container_name: str = Field(default="patient-reports", description="Blob container for reports")

    @field_validator("connection_string")
    @classmethod
    def validate_connection_string(cls, v: str) -> str:
        """Validate Azure Storage connection string."""
        if v and not v.startswith("DefaultEndpointsProtocol="):
            raise ValueError("Invalid Azure Storage connection string format")
        return v


class AzureSpeechSettings(BaseSettings):
    """Azure Speech Service configuration settings."""

    model_config = SettingsConfigDict(env_prefix="AZURE_SPEECH_")

    subscription_key: str = Field(default="", description="Azure Speech Service subscription key")
    region: str = Field(default="", description="Azure Speech Service region (e.g., 'eastus')")
    endpoint: str = Field(default="", description="Explicit short-audio endpoint (optional)")
    locale: str = Field(default="en-US", description="Recognition locale")
    timeout_seconds: float = Field(default=30.0, description="HTTP timeout for one recognition")

    @field_validator("region")
    @classmethod
    def validate_region(cls, v: str) -> str:
        """Validate Azure region format."""
        if v and not v.replace("-", "").replace("_", "").isalnum():
            raise ValueError("Invalid Azure region format")
        return v

    @property
    def is_configured(self) -> bool:
        return bool(self.subscription_key and (self.region or self.endpoint))


class AzureOpenAISettings(BaseSettings):
    """Azure OpenAI configuration settings."""

    model_config = SettingsConfigDict(env_prefix="AZURE_OPENAI_")

    endpoint: str = Field(default="", description="Azure OpenAI endpoint URL")
    api_key: str = Field(default="", description="Azure OpenAI API key")
    api_version: str = Field(default="2024-12-01-preview", description="Azure OpenAI API version")
    deployment_name: str = Field(default="gpt-4o-mini", description="Azure OpenAI chat deployment name")

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Validate Azure OpenAI endpoint format."""
        if v and not (v.startswith("https://") and ".openai.azure.com" in v):
            raise ValueError("Invalid Azure OpenAI endpoint format. Must be: https://xxx.openai.azure.com/")
        return v


class AnalysisSettings(BaseSettings):
    """Symptom analysis provider settings."""

    model_config = SettingsConfigDict(env_prefix="ANALYSIS_")

    provider: str = Field(default="mock", description="Analysis provider (mock or azure_openai)")
    temperature: float = Field(default=0.2, description="Sampling temperature for the model")
    max_tokens: int = Field(default=800, description="Maximum tokens for the analysis reply")

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        if v.lower() not in ("mock", "azure_openai"):
            raise ValueError("Analysis provider must be 'mock' or 'azure_openai'")
        return v.lower()

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        """Validate temperature."""
        if not 0.0 <= v <= 2.0:
            raise ValueError("Temperature must be between 0.0 and 2.0")
        return v


class AuthSettings(BaseSettings):
    """Managed identity provider settings."""

    model_config = SettingsConfigDict(env_prefix="AUTH_")

    url: str = Field(default="", description="Identity provider base URL")
    api_key: str = Field(default="", description="Public API key sent as the 'apikey' header")
    timeout_seconds: float = Field(default=15.0, description="HTTP timeout for identity calls")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("AUTH_URL must be an http(s) URL")
        return v.rstrip("/")


class CheckInSettings(BaseSettings):
    """Check-in workflow settings."""

    model_config = SettingsConfigDict(env_prefix="CHECKIN_")

    min_patient_id_length: int = Field(default=4, description="Minimum patient id length for lookup")
    min_description_length: int = Field(default=10, description="Minimum symptom description length")
    seed_demo_data: bool = Field(default=True, description="Seed demo patients and symptom vocabulary at startup")

    @field_validator("min_patient_id_length", "min_description_length")
    @classmethod
    def validate_lengths(cls, v: int) -> int:
        if not 1 <= v <= 200:
            raise ValueError("Minimum lengths must be between 1 and 200")
        return v


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application settings
    app_name: str = Field(default="Clinic-Intake", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    app_env: str = Field(default="development", description="Application environment")
    debug: bool = Field(default=False, description="Debug mode")
    port: int = Field(default=8000, description="Application port")
    host: str = Field(default="0.0.0.0", description="Application host")

    # Sub-settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    file_storage: FileStorageSettings = Field(default_factory=FileStorageSettings)
    azure_blob: AzureBlobSettings = Field(default_factory=AzureBlobSettings)
    azure_speech: AzureSpeechSettings = Field(default_factory=AzureSpeechSettings)
    azure_openai: AzureOpenAISettings = Field(default_factory=AzureOpenAISettings)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    checkin: CheckInSettings = Field(default_factory=CheckInSettings)

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate application environment."""
        valid_envs = ["development", "staging", "production", "testing"]
        if v.lower() not in valid_envs:
            raise ValueError(f"App environment must be one of: {valid_envs}")
        return v.lower()

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port number."""
        if not 1 <= v <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.app_env == "testing"


# Global settings instance (loaded after attempting to read .env)
_settings: Optional[Settings] = None


def _load_env_file_if_available() -> None:
    """Best-effort load of .env by searching current and parent directories.

    This helps in environments where the working directory isn't the project
    root and pydantic's env_file doesn't get resolved as expected.
    """
    from dotenv import load_dotenv

    cwd = Path(os.getcwd()).resolve()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / ".env"
        if candidate.exists():
            # Do not override already-set environment variables
            load_dotenv(dotenv_path=str(candidate), override=False)
            break


def get_settings() -> Settings:
    """Get application settings instance (lazy-init with .env discovery)."""
    global _settings
    if _settings is None:
        _load_env_file_if_available()
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
