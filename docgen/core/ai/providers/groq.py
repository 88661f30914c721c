"""Groq provider adapter."""

from __future__ import annotations

from typing import Any, Mapping

from ..config import ProviderAdapterSettings
from ..types import ImagePart, PromptMessage, ProviderName, ResponseFormat
from .base import BaseAIClient, ProviderCallRequest, ProviderResponse


def _serialise_content(message: PromptMessage) -> Any:
    if isinstance(message.content, str):
        return message.content
    parts: list[dict[str, Any]] = []
    for part in message.content:
        if isinstance(part, ImagePart):
            parts.append({"type": "image_url", "image_url": {"url": part.url}})
        else:
            parts.append({"type": "text", "text": part.text})
    return parts


class ChatCompletionsClient(BaseAIClient):
    """Adapter for OpenAI compatible Chat Completions APIs."""

    default_base_url = "https://api.openai.com/v1"

    def __init__(
        self,
        provider: ProviderName,
        config: ProviderAdapterSettings,
        *,
        transport=None,
    ) -> None:
        headers = {"Content-Type": "application/json"}
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        super().__init__(
            provider,
            config,
            base_url=config.base_url or self.default_base_url,
            default_headers=headers,
            transport=transport,
        )

    def _endpoint(self, call: ProviderCallRequest) -> str:
        return "/chat/completions"

    def _build_payload(self, call: ProviderCallRequest) -> Mapping[str, Any]:
        payload: dict[str, Any] = {
            "model": call.model,
            "messages": [
                {"role": message.role, "content": _serialise_content(message)}
                for message in call.messages
            ],
            "temperature": call.temperature,
            "max_tokens": call.max_output_tokens,
        }
        if call.response_format is ResponseFormat.JSON:
            payload["response_format"] = {"type": "json_object"}
        return payload

    def _parse_response(self, data: Mapping[str, Any], call: ProviderCallRequest) -> ProviderResponse:
        choices = data.get("choices") or []
        if not choices or not isinstance(choices[0], Mapping):
            raise self._malformed("response missing choices")
        message = choices[0].get("message") or {}
        content = message.get("content")
        if not isinstance(content, str) or not content:
            raise self._malformed("returned no content")
        model = data.get("model") or call.model
        return ProviderResponse(
            content=content,
            model=model,
            raw=data,
            metadata={"finish_reason": choices[0].get("finish_reason")},
        )


class GroqClient(ChatCompletionsClient):
    """Adapter for the Groq Chat Completions API."""

    default_base_url = "https://api.groq.com/openai/v1"

    def __init__(self, config: ProviderAdapterSettings, *, transport=None) -> None:
        super().__init__(ProviderName.GROQ, config, transport=transport)


__all__ = ("ChatCompletionsClient", "GroqClient")
