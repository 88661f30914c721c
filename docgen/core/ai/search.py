"""Web search augmentation for completion requests."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Mapping

import httpx

from .config import SearchSettings
from .exceptions import AugmentationError
from .prompts import SEARCH_CONTEXT_TEMPLATE
from .types import CompletionRequest, PromptMessage, ProviderName, TextPart

logger = logging.getLogger(__name__)

# Gemini grounds its answers with native search; local models are kept
# unaugmented to bound latency.
SEARCH_EXEMPT_PROVIDERS = frozenset({ProviderName.GEMINI, ProviderName.OLLAMA})


class SerperSearchClient:
    """Minimal client for the Serper Google search API."""

    def __init__(
        self,
        config: SearchSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.request_timeout,
            transport=transport,
        )

    @property
    def configured(self) -> bool:
        return bool(self._config.api_key)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def search(self, query: str) -> str:
        """Return top organic results for *query* as plain text snippets."""

        if not self._config.api_key:
            raise AugmentationError("Search API key missing")

        try:
            response = await self._client.post(
                "/search",
                json={"q": query, "num": self._config.result_count},
                headers={"X-API-KEY": self._config.api_key},
            )
        except httpx.RequestError as exc:
            raise AugmentationError(f"Search request transport error: {exc}") from exc

        if response.status_code >= 400:
            raise AugmentationError(f"Search request failed with status {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise AugmentationError("Search API returned invalid JSON") from exc

        return self._format_results(data)

    @staticmethod
    def _format_results(data: Any) -> str:
        if not isinstance(data, Mapping):
            raise AugmentationError("Search API returned an unexpected body")
        organic = data.get("organic") or []
        lines = [
            f"{item.get('title', '')}: {item.get('snippet', '')}"
            for item in organic
            if isinstance(item, Mapping)
        ]
        if not lines:
            return ""
        return "Real-Time Search Results:\n" + "\n".join(lines)


class SearchAugmenter:
    """Prepends real-time search context to the last message of a request."""

    def __init__(self, client: SerperSearchClient) -> None:
        self._client = client

    async def aclose(self) -> None:
        await self._client.aclose()

    async def augment(self, request: CompletionRequest, provider: ProviderName) -> CompletionRequest:
        """Return *request* enriched with search context when applicable.

        The input request is never mutated. Any search failure returns the
        original request object unchanged.
        """

        if not request.web_search or provider in SEARCH_EXEMPT_PROVIDERS:
            return request
        if not request.messages:
            return request

        last_message = request.messages[-1]
        query = last_message.text.strip()
        if not query:
            return request

        try:
            context = await self._client.search(query)
        except AugmentationError as exc:
            logger.warning(
                "ai.search.skipped",
                extra={"provider": provider.value, "error": str(exc)},
            )
            return request

        if not context:
            return request

        logger.info(
            "ai.search.injected",
            extra={"provider": provider.value, "characters": len(context)},
        )
        augmented = SEARCH_CONTEXT_TEMPLATE.format(query=query, context=context)
        if isinstance(last_message.content, str):
            content: Any = augmented
        else:
            # Keep attached images, replace the text.
            content = [TextPart(text=augmented), *last_message.images]
        messages = [*request.messages[:-1], PromptMessage(role=last_message.role, content=content)]
        return dataclasses.replace(request, messages=messages)


__all__ = ("SEARCH_EXEMPT_PROVIDERS", "SearchAugmenter", "SerperSearchClient")
