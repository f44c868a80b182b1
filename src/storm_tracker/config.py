"""Typed settings loader for the storm tracker."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AnyUrl, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_env: Literal["dev", "staging", "prod"] = Field(default="dev", alias="APP_ENV")

    ibtracs_source: str = Field(
        default="./data/IBTrACS_last3years_1bcb_f875_aa83.csv",
        alias="IBTRACS_SOURCE",
    )
    bst_source: str = Field(default="./data/bst_all.txt", alias="BST_SOURCE")
    source_timeout_seconds: float = Field(default=5.0, alias="SOURCE_TIMEOUT_SECONDS")
    source_user_agent: str = Field(
        default="storm-tracker/0.1 (contact: research@example.com)",
        alias="SOURCE_USER_AGENT",
    )

    groq_api_key: str | None = Field(default=None, alias="GROQ_API_KEY", repr=False)
    groq_api_url: AnyUrl = Field(
        default=AnyUrl("https://api.groq.com/openai/v1/chat/completions"),
        alias="GROQ_API_URL",
    )
    groq_model: str = Field(default="llama-3.1-8b-instant", alias="GROQ_MODEL")
    groq_temperature: float = Field(default=0.7, alias="GROQ_TEMPERATURE")
    groq_max_tokens: int = Field(default=4000, alias="GROQ_MAX_TOKENS")
    groq_timeout_seconds: float = Field(default=30.0, alias="GROQ_TIMEOUT_SECONDS")

    enrichment_enabled: bool = Field(default=True, alias="ENRICHMENT_ENABLED")
    storm_max_print: int = Field(default=20, alias="STORM_MAX_PRINT")

    @field_validator("groq_api_key", mode="before")
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        """Treat an empty env-string key as unset."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @model_validator(mode="after")
    def validate_ranges(self) -> Settings:
        """Validate source locations and numeric limits."""
        if not self.ibtracs_source.strip():
            raise ValueError("IBTRACS_SOURCE must not be empty.")
        if not self.bst_source.strip():
            raise ValueError("BST_SOURCE must not be empty.")
        if self.source_timeout_seconds <= 0:
            raise ValueError("SOURCE_TIMEOUT_SECONDS must be > 0.")
        if not self.source_user_agent.strip():
            raise ValueError("SOURCE_USER_AGENT must not be empty.")
        if not self.groq_model.strip():
            raise ValueError("GROQ_MODEL must not be empty.")
        if not (0 <= self.groq_temperature <= 2):
            raise ValueError("GROQ_TEMPERATURE must be between 0 and 2.")
        if self.groq_max_tokens <= 0:
            raise ValueError("GROQ_MAX_TOKENS must be > 0.")
        if self.groq_timeout_seconds <= 0:
            raise ValueError("GROQ_TIMEOUT_SECONDS must be > 0.")
        if self.storm_max_print <= 0:
            raise ValueError("STORM_MAX_PRINT must be > 0.")
        return self

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for logging (no credentials)."""
        return {
            "app_env": self.app_env,
            "ibtracs_source": self.ibtracs_source,
            "bst_source": self.bst_source,
            "source_timeout_seconds": self.source_timeout_seconds,
            "groq_api_url": str(self.groq_api_url),
            "groq_model": self.groq_model,
            "groq_timeout_seconds": self.groq_timeout_seconds,
            "groq_key_configured": self.groq_api_key is not None,
            "enrichment_enabled": self.enrichment_enabled,
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
