"""Routes exposing direct and fallback AI completions."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...core.ai.exceptions import (
    AllProvidersExhaustedError,
    InvalidRequestError,
    ProviderError,
)
from ...core.ai.gateway import CompletionGateway
from ...core.ai.types import CompletionResult
from ...models.common import ResponseEnvelope
from ...models.completion import CompletionPayload, CompletionResponse
from ..dependencies import get_completion_gateway

router = APIRouter(prefix="/ai", tags=["completions"])


def _response_from(result: CompletionResult) -> CompletionResponse:
    return CompletionResponse(
        text=result.text,
        provider=result.provider,
        model=result.model,
        attempts=result.metadata.get("attempts", 1),
    )


@router.post(
    "/complete",
    response_model=ResponseEnvelope[CompletionResponse],
    summary="Run a completion against a single provider",
)
async def complete(
    payload: CompletionPayload,
    gateway: CompletionGateway = Depends(get_completion_gateway),
) -> ResponseEnvelope[CompletionResponse]:
    try:
        result = await gateway.complete(payload.to_request())
    except (InvalidRequestError, ProviderError) as exc:
        return ResponseEnvelope.failure(exc)

    return ResponseEnvelope.success_payload(_response_from(result))


@router.post(
    "/complete/fallback",
    response_model=ResponseEnvelope[CompletionResponse],
    summary="Run a completion across the provider fallback chain",
)
async def complete_with_fallback(
    payload: CompletionPayload,
    gateway: CompletionGateway = Depends(get_completion_gateway),
) -> ResponseEnvelope[CompletionResponse]:
    try:
        result = await gateway.complete_with_fallback(payload.to_request())
    except (InvalidRequestError, AllProvidersExhaustedError) as exc:
        return ResponseEnvelope.failure(exc)

    return ResponseEnvelope.success_payload(_response_from(result))


__all__ = ("router",)
