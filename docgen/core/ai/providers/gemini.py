"""Gemini provider adapter."""

from __future__ import annotations

from typing import Any, Mapping

from ..config import ProviderAdapterSettings
from ..prompts import fact_verification_directive
from ..types import ImagePart, PromptMessage, ProviderName, ResponseFormat
from .base import BaseAIClient, ProviderCallRequest, ProviderResponse


def _parts(message: PromptMessage) -> list[dict[str, Any]]:
    if isinstance(message.content, str):
        return [{"text": message.content}]
    parts: list[dict[str, Any]] = []
    for part in message.content:
        if isinstance(part, ImagePart):
            parts.append({"inline_data": {"mime_type": part.mime_type, "data": part.data}})
        else:
            parts.append({"text": part.text})
    return parts


class GeminiClient(BaseAIClient):
    """Adapter for Google Gemini generateContent API.

    Search grounding is always requested, so the gateway never augments
    Gemini requests with external search results.
    """

    def __init__(self, config: ProviderAdapterSettings, *, transport=None) -> None:
        super().__init__(
            ProviderName.GEMINI,
            config,
            base_url=config.base_url or "https://generativelanguage.googleapis.com",
            default_headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def is_available(self) -> bool:
        return bool(self.config.api_key)

    def _endpoint(self, call: ProviderCallRequest) -> str:
        return f"/v1beta/models/{call.model}:generateContent"

    def _request_kwargs(self, call: ProviderCallRequest) -> dict[str, Any]:
        return {"params": {"key": self.config.api_key or ""}}

    def _build_payload(self, call: ProviderCallRequest) -> Mapping[str, Any]:
        messages = list(call.messages)
        directive = fact_verification_directive()
        system_text = directive
        if messages and messages[0].role == "system":
            system_text = f"{messages[0].text}\n\n{directive}"
            messages = messages[1:]

        contents = [
            {
                "role": "model" if message.role == "assistant" else "user",
                "parts": _parts(message),
            }
            for message in messages
        ]

        return {
            "contents": contents,
            "systemInstruction": {"parts": [{"text": system_text}]},
            "tools": [{"google_search": {}}],
            "generationConfig": {
                "temperature": call.temperature,
                "maxOutputTokens": call.max_output_tokens,
                "responseMimeType": (
                    "application/json"
                    if call.response_format is ResponseFormat.JSON
                    else "text/plain"
                ),
            },
        }

    def _parse_response(self, data: Mapping[str, Any], call: ProviderCallRequest) -> ProviderResponse:
        candidates = data.get("candidates") or []
        if not candidates or not isinstance(candidates[0], Mapping):
            raise self._malformed("response missing candidates")
        first_candidate = candidates[0]
        parts = (first_candidate.get("content") or {}).get("parts") or []
        content = "".join(
            part.get("text", "") for part in parts if isinstance(part, Mapping)
        )
        if not content:
            raise self._malformed("returned no content")
        model = data.get("modelVersion") or call.model
        return ProviderResponse(
            content=content,
            model=model,
            raw=data,
            metadata={"finish_reason": first_candidate.get("finishReason")},
        )


__all__ = ("GeminiClient",)
