"""Provider specific AI adapter implementations."""

from __future__ import annotations

from typing import Callable, Mapping

import httpx

from ..config import AIAdapterSettings
from ..types import ProviderName
from .base import BaseAIClient
from .gemini import GeminiClient
from .groq import GroqClient
from .kimi import KimiClient
from .ollama import OllamaClient

ClientFactory = Callable[[AIAdapterSettings, "httpx.AsyncBaseTransport | None"], BaseAIClient]

PROVIDER_CLIENTS: Mapping[ProviderName, ClientFactory] = {
    ProviderName.GROQ: lambda settings, transport: GroqClient(settings.groq, transport=transport),
    ProviderName.GEMINI: lambda settings, transport: GeminiClient(settings.gemini, transport=transport),
    ProviderName.OLLAMA: lambda settings, transport: OllamaClient(
        settings.ollama,
        transport=transport,
        liveness_timeout=settings.liveness_timeout,
    ),
    ProviderName.KIMI: lambda settings, transport: KimiClient(settings.kimi, transport=transport),
}

__all__ = (
    "BaseAIClient",
    "ClientFactory",
    "GeminiClient",
    "GroqClient",
    "KimiClient",
    "OllamaClient",
    "PROVIDER_CLIENTS",
)
