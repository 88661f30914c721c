"""Kimi (Moonshot) provider adapter."""

from __future__ import annotations

from ..config import ProviderAdapterSettings
from ..types import ProviderName
from .groq import ChatCompletionsClient


class KimiClient(ChatCompletionsClient):
    """Adapter for the OpenAI compatible Moonshot API."""

    default_base_url = "https://api.moonshot.cn/v1"

    def __init__(self, config: ProviderAdapterSettings, *, transport=None) -> None:
        super().__init__(ProviderName.KIMI, config, transport=transport)

    async def is_available(self) -> bool:
        return bool(self.config.api_key)


__all__ = ("KimiClient",)
