"""Completion gateway coordinating model resolution, augmentation and provider fallback."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Mapping

import httpx

from .config import AIAdapterSettings
from .exceptions import (
    AllProvidersExhaustedError,
    FallbackDeadlineError,
    InvalidRequestError,
    ProviderConfigurationError,
    ProviderError,
)
from .providers import PROVIDER_CLIENTS, BaseAIClient
from .providers.base import ProviderCallRequest, ProviderResponse
from .resolver import resolve_model
from .search import SearchAugmenter, SerperSearchClient
from .types import AUTO_PROVIDER, CompletionRequest, CompletionResult, ProviderName

logger = logging.getLogger(__name__)


class CompletionGateway:
    """Facade dispatching completion requests across AI providers.

    Provider selection is request-local: the configured default provider is
    never modified, and the fallback chain is computed per call.
    """

    def __init__(
        self,
        config: AIAdapterSettings,
        *,
        transport_overrides: Mapping[ProviderName, httpx.AsyncBaseTransport] | None = None,
        search_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport_overrides = dict(transport_overrides or {})
        self._clients = self._initialise_clients()
        self._augmenter = SearchAugmenter(
            SerperSearchClient(self.config.search, transport=search_transport)
        )

    async def __aenter__(self) -> "CompletionGateway":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    @property
    def config(self) -> AIAdapterSettings:
        return self._config

    async def aclose(self) -> None:
        """Close any underlying HTTP clients."""

        for client in self._clients.values():
            await client.aclose()
        await self._augmenter.aclose()

    def effective_provider(self, forced_provider: str | None) -> ProviderName:
        """Return the provider a direct call is dispatched to."""

        forced = self._parse_provider(forced_provider)
        return forced or self.config.default_provider

    def candidate_chain(self, forced_provider: str | None) -> list[ProviderName]:
        """Return the ordered providers attempted by :meth:`complete_with_fallback`."""

        canonical = list(self.config.fallback_order)
        forced = self._parse_provider(forced_provider)
        if forced is None:
            return canonical
        return [forced, *(provider for provider in canonical if provider is not forced)]

    async def complete(self, request: CompletionRequest) -> CompletionResult:
        """Dispatch *request* to a single provider; errors propagate unchanged."""

        self._validate(request)
        provider = self.effective_provider(request.forced_provider)
        request = await self._augmenter.augment(request, provider)
        response, model = await self._invoke(provider, request, attempt=1)
        return self._result(provider, response, model, attempts=1)

    async def complete_with_fallback(self, request: CompletionRequest) -> CompletionResult:
        """Try each candidate provider in turn until one succeeds."""

        self._validate(request)
        chain = self.candidate_chain(request.forced_provider)
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.config.fallback_deadline

        last_error: ProviderError | None = None
        last_skip: ProviderError | None = None
        attempted: list[str] = []
        skipped: list[str] = []
        logger.info(
            "ai.fallback.start",
            extra={"chain": [provider.value for provider in chain]},
        )

        for provider in chain:
            client = self._client_for(provider)
            try:
                available = await asyncio.wait_for(
                    client.is_available(), self._remaining(loop, deadline)
                )
            except asyncio.TimeoutError:
                last_error = self._deadline_error(provider)
                break
            if not available:
                skipped.append(provider.value)
                last_skip = ProviderError(
                    f"{provider.value} is not available", provider=provider.value
                )
                logger.info("ai.fallback.skip", extra={"provider": provider.value})
                continue

            attempted.append(provider.value)
            try:
                response, model = await asyncio.wait_for(
                    self._invoke(provider, request, attempt=len(attempted)),
                    self._remaining(loop, deadline),
                )
            except asyncio.TimeoutError:
                last_error = self._deadline_error(provider)
                break
            except ProviderError as exc:
                last_error = exc
                action = "ai.fallback.rate_limited" if exc.is_rate_limit else "ai.fallback.failure"
                logger.warning(action, extra={"provider": provider.value, "error": str(exc)})
                continue

            return self._result(provider, response, model, attempts=len(attempted))

        raise AllProvidersExhaustedError(
            last_error or last_skip,
            attempted=attempted,
            skipped=skipped,
        )

    async def _invoke(
        self,
        provider: ProviderName,
        request: CompletionRequest,
        *,
        attempt: int,
    ) -> tuple[ProviderResponse, str]:
        client = self._client_for(provider)
        model = resolve_model(
            provider,
            request.model,
            default=self.config.for_provider(provider).model,
        )
        call = ProviderCallRequest(
            messages=list(request.messages),
            model=model,
            temperature=request.temperature,
            max_output_tokens=request.max_tokens,
            response_format=request.response_format,
            metadata={"attempt": attempt},
        )

        start_time = time.perf_counter()
        self._log_event("ai.request.start", provider, model, attempt)
        try:
            response = await client.generate(call)
        except ProviderError as exc:
            self._log_event(
                "ai.request.failure",
                provider,
                model,
                attempt,
                duration=time.perf_counter() - start_time,
                error=str(exc),
            )
            raise
        self._log_event(
            "ai.request.success",
            provider,
            model,
            attempt,
            duration=time.perf_counter() - start_time,
        )
        return response, model

    def _initialise_clients(self) -> dict[ProviderName, BaseAIClient]:
        transports = self._transport_overrides
        return {
            provider: factory(self.config, transports.get(provider))
            for provider, factory in PROVIDER_CLIENTS.items()
        }

    def _client_for(self, provider: ProviderName) -> BaseAIClient:
        client = self._clients.get(provider)
        if client is None:  # pragma: no cover - every ProviderName is registered
            raise ProviderConfigurationError(f"Provider '{provider.value}' is not supported")
        return client

    @staticmethod
    def _parse_provider(value: str | None) -> ProviderName | None:
        if value is None:
            return None
        normalised = value.strip().lower()
        if not normalised or normalised == AUTO_PROVIDER:
            return None
        try:
            return ProviderName(normalised)
        except ValueError as exc:
            raise InvalidRequestError(f"Unknown AI provider '{value}'") from exc

    @staticmethod
    def _validate(request: CompletionRequest) -> None:
        if not request.messages:
            raise InvalidRequestError("AI requests require at least one message")
        if not 0 <= request.temperature <= 2:
            raise InvalidRequestError("temperature must be between 0 and 2")
        if request.max_tokens <= 0:
            raise InvalidRequestError("max_tokens must be positive")

    @staticmethod
    def _remaining(loop: asyncio.AbstractEventLoop, deadline: float) -> float:
        return max(deadline - loop.time(), 0.0)

    def _deadline_error(self, provider: ProviderName) -> FallbackDeadlineError:
        logger.warning(
            "ai.fallback.deadline",
            extra={"provider": provider.value, "deadline": self.config.fallback_deadline},
        )
        return FallbackDeadlineError(
            f"Fallback chain exceeded {self.config.fallback_deadline}s while trying {provider.value}",
            provider=provider.value,
        )

    @staticmethod
    def _result(
        provider: ProviderName,
        response: ProviderResponse,
        model: str,
        *,
        attempts: int,
    ) -> CompletionResult:
        return CompletionResult(
            text=response.content,
            provider=provider,
            model=response.model or model,
            metadata={"attempts": attempts, **dict(response.metadata)},
        )

    @staticmethod
    def _log_event(
        action: str,
        provider: ProviderName,
        model: str,
        attempt: int,
        *,
        duration: float | None = None,
        error: str | None = None,
    ) -> None:
        extra = {
            "provider": provider.value,
            "model": model,
            "attempt": attempt,
        }
        if duration is not None:
            extra["duration"] = duration
        if error is not None:
            extra["error"] = error
        logger.info(action, extra=extra)


__all__ = ("CompletionGateway",)
