"""Base implementation for provider specific HTTP clients."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx

from ..config import ProviderAdapterSettings
from ..exceptions import MalformedResponseError, ProviderError
from ..types import PromptMessage, ProviderName, ResponseFormat

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ProviderCallRequest:
    """Internal representation of a provider call."""

    messages: list[PromptMessage]
    model: str
    temperature: float
    max_output_tokens: int
    response_format: ResponseFormat = ResponseFormat.TEXT
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class ProviderResponse:
    """Wrapper for provider responses after parsing."""

    content: str
    model: str
    raw: Mapping[str, Any]
    metadata: Mapping[str, Any] = field(default_factory=dict)


class BaseAIClient:
    """Shared HTTP transport and request handling for AI providers."""

    def __init__(
        self,
        provider: ProviderName,
        config: ProviderAdapterSettings,
        *,
        base_url: str,
        default_headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._provider = provider
        self._config = config
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=config.request_timeout,
            headers=default_headers or {},
            transport=transport,
        )

    @property
    def provider(self) -> ProviderName:
        return self._provider

    @property
    def config(self) -> ProviderAdapterSettings:
        return self._config

    async def aclose(self) -> None:
        await self._client.aclose()

    async def is_available(self) -> bool:
        """Return whether the provider can be attempted at all."""

        return True

    async def generate(self, call: ProviderCallRequest) -> ProviderResponse:
        """Execute the provider request and parse the response."""

        if not call.messages:
            raise ProviderError(
                f"{self._provider.value} requests require at least one message",
                provider=self._provider.value,
            )

        payload = self._build_payload(call)
        request_kwargs = self._request_kwargs(call)

        try:
            response = await self._client.post(self._endpoint(call), json=payload, **request_kwargs)
        except httpx.RequestError as exc:
            raise ProviderError(
                f"{self._provider.value} request transport error: {exc.__class__.__name__}",
                provider=self._provider.value,
            ) from exc

        if response.status_code >= 400:
            logger.debug(
                "Provider %s responded with error %s: %s",
                self._provider.value,
                response.status_code,
                response.text,
            )
            raise ProviderError(
                f"{self._provider.value} request failed with status {response.status_code}: "
                f"{self._error_message(response)}",
                status=response.status_code,
                provider=self._provider.value,
            )

        try:
            parsed = response.json()
        except ValueError as exc:
            raise ProviderError(
                f"{self._provider.value} returned invalid JSON",
                status=response.status_code,
                provider=self._provider.value,
            ) from exc

        if not isinstance(parsed, Mapping):
            raise MalformedResponseError(
                f"{self._provider.value} returned an unexpected response body",
                status=response.status_code,
                provider=self._provider.value,
            )

        return self._parse_response(parsed, call)

    def _malformed(self, message: str) -> MalformedResponseError:
        return MalformedResponseError(
            f"{self._provider.value} {message}",
            status=200,
            provider=self._provider.value,
        )

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract a readable error message from an error response."""

        try:
            data = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(data, Mapping):
            error = data.get("error")
            if isinstance(error, Mapping) and error.get("message"):
                return str(error["message"])
            if isinstance(error, str) and error:
                return error
        return response.text or response.reason_phrase

    def _request_kwargs(self, call: ProviderCallRequest) -> dict[str, Any]:
        """Additional keyword arguments to forward with the request."""

        return {}

    def _endpoint(self, call: ProviderCallRequest) -> str:
        """Return the endpoint path to POST to."""

        return "/"

    def _build_payload(self, call: ProviderCallRequest) -> Mapping[str, Any]:
        """Serialise the request payload for the provider."""

        raise NotImplementedError

    def _parse_response(self, data: Mapping[str, Any], call: ProviderCallRequest) -> ProviderResponse:
        """Parse the provider specific response payload."""

        raise NotImplementedError


__all__ = (
    "BaseAIClient",
    "ProviderCallRequest",
    "ProviderResponse",
)
