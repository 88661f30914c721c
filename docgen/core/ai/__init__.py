"""AI provider adapters and completion gateway exports."""

from __future__ import annotations


from .config import AIAdapterSettings, ProviderAdapterSettings, SearchSettings, SolverSettings
from .exceptions import (
    AIServiceError,
    AllProvidersExhaustedError,
    AugmentationError,
    ChunkParseError,
    FallbackDeadlineError,
    InvalidRequestError,
    MalformedResponseError,
    ProviderConfigurationError,
    ProviderError,
)
from .gateway import CompletionGateway
from .resolver import resolve_model
from .types import (
    Chunk,
    CompletionRequest,
    CompletionResult,
    ImagePart,
    PromptMessage,
    ProviderName,
    ResponseFormat,
    SolutionItem,
    TextPart,
)

__all__ = (
    "AIAdapterSettings",
    "AIServiceError",
    "AllProvidersExhaustedError",
    "AugmentationError",
    "Chunk",
    "ChunkParseError",
    "CompletionGateway",
    "CompletionRequest",
    "CompletionResult",
    "FallbackDeadlineError",
    "ImagePart",
    "InvalidRequestError",
    "MalformedResponseError",
    "PromptMessage",
    "ProviderAdapterSettings",
    "ProviderConfigurationError",
    "ProviderError",
    "ProviderName",
    "ResponseFormat",
    "SearchSettings",
    "SolutionItem",
    "SolverSettings",
    "TextPart",
    "resolve_model",
)
