"""Ollama provider adapter for locally hosted models."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from ..config import ProviderAdapterSettings
from ..prompts import DEEP_RESEARCH_PERSONA
from ..types import PromptMessage, ProviderName, ResponseFormat
from .base import BaseAIClient, ProviderCallRequest, ProviderResponse

logger = logging.getLogger(__name__)

DEFAULT_OLLAMA_URL = "http://localhost:11434"


def _header(role: str) -> str:
    return f"<|start_header_id|>{role}<|end_header_id|>\n\n"


def build_prompt(messages: list[PromptMessage], system_prompt: str) -> str:
    """Flatten *messages* into a Llama 3 chat template prompt."""

    prompt = f"<|begin_of_text|>{_header('system')}{system_prompt}<|eot_id|>"
    for message in messages:
        if message.role in ("user", "assistant"):
            prompt += f"{_header(message.role)}{message.text}<|eot_id|>"
    return prompt + _header("assistant")


class OllamaClient(BaseAIClient):
    """Adapter for the Ollama ``/api/generate`` endpoint."""

    def __init__(
        self,
        config: ProviderAdapterSettings,
        *,
        transport=None,
        liveness_timeout: float = 2.0,
    ) -> None:
        super().__init__(
            ProviderName.OLLAMA,
            config,
            base_url=config.base_url or DEFAULT_OLLAMA_URL,
            default_headers={"Content-Type": "application/json"},
            transport=transport,
        )
        self._liveness_timeout = liveness_timeout

    async def is_available(self) -> bool:
        """Probe ``/api/tags`` to check that the local daemon is reachable."""

        try:
            response = await self._client.get("/api/tags", timeout=self._liveness_timeout)
        except httpx.HTTPError as exc:
            logger.debug("Ollama liveness probe failed: %s", exc)
            return False
        return response.is_success

    def _endpoint(self, call: ProviderCallRequest) -> str:
        return "/api/generate"

    def _build_payload(self, call: ProviderCallRequest) -> Mapping[str, Any]:
        caller_system = next(
            (message.text for message in call.messages if message.role == "system"),
            "",
        )
        system_prompt = f"{caller_system}\n\n{DEEP_RESEARCH_PERSONA}".strip()

        payload: dict[str, Any] = {
            "model": call.model,
            "prompt": build_prompt(call.messages, system_prompt),
            "system": system_prompt,
            "stream": False,
            "options": {
                "temperature": call.temperature,
                "num_predict": call.max_output_tokens,
            },
        }
        images = [image.data for message in call.messages for image in message.images]
        if images:
            payload["images"] = images
        if call.response_format is ResponseFormat.JSON:
            payload["format"] = "json"
        return payload

    def _parse_response(self, data: Mapping[str, Any], call: ProviderCallRequest) -> ProviderResponse:
        content = data.get("response")
        if not isinstance(content, str) or not content:
            raise self._malformed("returned no content")
        model = data.get("model") or call.model
        return ProviderResponse(
            content=content,
            model=model,
            raw=data,
            metadata={"done_reason": data.get("done_reason")},
        )


__all__ = ("DEFAULT_OLLAMA_URL", "OllamaClient", "build_prompt")
