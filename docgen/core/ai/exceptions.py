"""Custom exceptions for AI provider orchestration."""

from __future__ import annotations

from typing import Sequence


class AIServiceError(RuntimeError):
    """Base exception for AI service failures."""


class ProviderConfigurationError(AIServiceError):
    """Raised when a provider is not correctly configured for use."""


class InvalidRequestError(AIServiceError):
    """Raised when a completion or solver request cannot be processed as given."""


class ProviderError(AIServiceError):
    """Raised when a provider adapter encounters a request/response issue."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        provider: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.provider = provider

    @property
    def is_rate_limit(self) -> bool:
        return self.status == 429 or "rate limit" in self.message.lower()


class MalformedResponseError(ProviderError):
    """Raised when a provider answered successfully but carried no usable content."""


class FallbackDeadlineError(ProviderError):
    """Raised when the fallback chain runs out of its overall time budget."""


class AllProvidersExhaustedError(AIServiceError):
    """Raised when every candidate of a fallback chain failed or was skipped."""

    def __init__(
        self,
        last_error: Exception | None,
        *,
        attempted: Sequence[str] = (),
        skipped: Sequence[str] = (),
    ) -> None:
        detail = f": {last_error}" if last_error is not None else ""
        super().__init__(f"All AI providers failed{detail}")
        self.last_error = last_error
        self.attempted = tuple(attempted)
        self.skipped = tuple(skipped)


class AugmentationError(AIServiceError):
    """Raised internally when web search context could not be retrieved."""


class ChunkParseError(AIServiceError):
    """Raised internally when a chunk's model output does not match the solver schema."""


__all__ = (
    "AIServiceError",
    "AllProvidersExhaustedError",
    "AugmentationError",
    "ChunkParseError",
    "FallbackDeadlineError",
    "InvalidRequestError",
    "MalformedResponseError",
    "ProviderConfigurationError",
    "ProviderError",
)
