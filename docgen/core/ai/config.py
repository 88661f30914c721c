"""Configuration models for AI provider adapters."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .types import ProviderName

DEFAULT_FALLBACK_ORDER = (ProviderName.GROQ, ProviderName.GEMINI, ProviderName.OLLAMA)


class ProviderAdapterSettings(BaseModel):
    """Provider specific adapter configuration."""

    model_config = ConfigDict(validate_assignment=True)

    base_url: str | None = Field(default=None, description="Base URL for the provider API")
    api_key: str | None = Field(default=None, description="API key used for authentication")
    model: str | None = Field(
        default=None,
        description="Replaces the built-in default model when the requested one is rejected",
    )
    request_timeout: float = Field(60.0, gt=0, description="HTTP request timeout in seconds")


class SearchSettings(BaseModel):
    """Settings for the web search augmentation stage."""

    model_config = ConfigDict(validate_assignment=True)

    base_url: str = Field(default="https://google.serper.dev", description="Search API base URL")
    api_key: str | None = Field(default=None, description="Search API key")
    result_count: int = Field(3, ge=1, description="Number of organic results to inject")
    request_timeout: float = Field(10.0, gt=0, description="Search request timeout in seconds")


class SolverSettings(BaseModel):
    """Settings for the chunked paper solver."""

    chunk_size: int = Field(6000, ge=1, description="Characters per document window")
    max_tokens: int = Field(8000, ge=1, description="Output token ceiling per chunk")
    temperature: float = Field(0.1, ge=0, le=2)
    model: str = Field(
        default="llama-3.3-70b-versatile",
        description="Model hint sent with every chunk; resolved per provider",
    )


class AIAdapterSettings(BaseModel):
    """Group of adapter settings for all supported providers."""

    model_config = ConfigDict(validate_assignment=True)

    groq: ProviderAdapterSettings = Field(default_factory=ProviderAdapterSettings)
    gemini: ProviderAdapterSettings = Field(default_factory=ProviderAdapterSettings)
    ollama: ProviderAdapterSettings = Field(
        default_factory=lambda: ProviderAdapterSettings(request_timeout=300.0)
    )
    kimi: ProviderAdapterSettings = Field(default_factory=ProviderAdapterSettings)

    default_provider: ProviderName = Field(
        default=ProviderName.GROQ,
        description="Provider used when a request does not force one",
    )
    fallback_order: list[ProviderName] = Field(
        default_factory=lambda: list(DEFAULT_FALLBACK_ORDER),
        min_length=1,
        description="Canonical provider order for fallback chains",
    )
    fallback_deadline: float = Field(
        180.0,
        gt=0,
        description="Overall time budget in seconds for a whole fallback chain",
    )
    liveness_timeout: float = Field(2.0, gt=0, description="Local runtime probe timeout in seconds")

    search: SearchSettings = Field(default_factory=SearchSettings)
    solver: SolverSettings = Field(default_factory=SolverSettings)

    @field_validator("fallback_order", mode="before")
    @classmethod
    def _split_fallback_order(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [item.strip().lower() for item in value.split(",") if item.strip()]
        return value

    @field_validator("fallback_order")
    @classmethod
    def _deduplicate(cls, value: list[ProviderName]) -> list[ProviderName]:
        return list(dict.fromkeys(value))

    def for_provider(self, provider: ProviderName) -> ProviderAdapterSettings:
        return getattr(self, provider.value)


__all__ = (
    "AIAdapterSettings",
    "DEFAULT_FALLBACK_ORDER",
    "ProviderAdapterSettings",
    "SearchSettings",
    "SolverSettings",
)
