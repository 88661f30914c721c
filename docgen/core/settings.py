"""Application settings and configuration management."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .ai.config import AIAdapterSettings
from .ai.types import ProviderName


def _env(name: str) -> AliasChoices:
    return AliasChoices(f"APP_{name}", name)


class Settings(BaseSettings):
    """Runtime configuration derived from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=(".env",),
        extra="ignore",
    )

    app_name: str = Field(default="DocGen AI Gateway")
    app_version: str = Field(default="0.1.0")
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)

    allowed_origins: list[str] = Field(
        default_factory=list,
        description="List of origins permitted by CORS configuration.",
    )

    groq_api_key: str | None = Field(default=None, validation_alias=_env("GROQ_API_KEY"))
    groq_base_url: str | None = Field(default=None, validation_alias=_env("GROQ_BASE_URL"))
    gemini_api_key: str | None = Field(default=None, validation_alias=_env("GEMINI_API_KEY"))
    kimi_api_key: str | None = Field(default=None, validation_alias=_env("KIMI_API_KEY"))
    kimi_base_url: str | None = Field(default=None, validation_alias=_env("KIMI_BASE_URL"))
    ollama_base_url: str | None = Field(default=None, validation_alias=_env("OLLAMA_BASE_URL"))
    serper_api_key: str | None = Field(
        default=None,
        validation_alias=_env("SERPER_API_KEY"),
        description="Credential for the web search augmentation provider.",
    )
    default_ai_provider: ProviderName | None = Field(
        default=None,
        validation_alias=_env("DEFAULT_AI_PROVIDER"),
        description="Provider used when a request does not force one.",
    )

    ai: AIAdapterSettings = Field(default_factory=AIAdapterSettings)

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_allowed_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("default_ai_provider", mode="before")
    @classmethod
    def _normalise_provider(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() or None
        return value

    @model_validator(mode="after")
    def _apply_flat_overrides(self) -> "Settings":
        """Copy flat environment credentials into the nested adapter settings.

        Values set explicitly on ``ai`` take precedence.
        """

        ai = self.ai
        overrides = (
            (ai.groq, "api_key", self.groq_api_key),
            (ai.groq, "base_url", self.groq_base_url),
            (ai.gemini, "api_key", self.gemini_api_key),
            (ai.kimi, "api_key", self.kimi_api_key),
            (ai.kimi, "base_url", self.kimi_base_url),
            (ai.ollama, "base_url", self.ollama_base_url),
            (ai.search, "api_key", self.serper_api_key),
        )
        for target, attribute, value in overrides:
            if value and getattr(target, attribute) is None:
                setattr(target, attribute, value)
        if self.default_ai_provider is not None and "default_provider" not in ai.model_fields_set:
            ai.default_provider = self.default_ai_provider
        return self


@lru_cache()
def get_settings() -> Settings:
    """Return a cached instance of application settings."""

    return Settings()
