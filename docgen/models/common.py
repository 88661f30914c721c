"""Response envelope shared by every endpoint."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field

from docgen.core.ai.exceptions import (
    AIServiceError,
    AllProvidersExhaustedError,
    InvalidRequestError,
    ProviderError,
)

T = TypeVar("T")

ErrorCode = Literal["invalid_request", "provider_error", "providers_exhausted"]


class ErrorDetail(BaseModel):
    """Machine readable failure attached to an unsuccessful response."""

    code: ErrorCode = Field(..., description="Failure category")
    message: str = Field(..., description="Human readable error message")
    details: dict[str, Any] | None = Field(
        default=None, description="Provider, status or chain context for the failure"
    )

    @classmethod
    def from_exception(cls, exc: AIServiceError) -> "ErrorDetail":
        """Translate a gateway or solver exception into an error payload."""

        if isinstance(exc, InvalidRequestError):
            return cls(code="invalid_request", message=str(exc))
        if isinstance(exc, AllProvidersExhaustedError):
            return cls(
                code="providers_exhausted",
                message=str(exc),
                details={"attempted": list(exc.attempted), "skipped": list(exc.skipped)},
            )
        if isinstance(exc, ProviderError):
            return cls(
                code="provider_error",
                message=str(exc),
                details={"provider": exc.provider, "status": exc.status},
            )
        return cls(code="provider_error", message=str(exc))


class ResponseEnvelope(BaseModel, Generic[T]):
    """Wraps either a payload or an :class:`ErrorDetail`, never both."""

    success: bool = Field(True, description="Indicates if the request was successful")
    data: T | None = Field(default=None)
    error: ErrorDetail | None = Field(default=None)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Timestamp when the response payload was generated",
    )

    @classmethod
    def success_payload(cls, data: T | None = None) -> "ResponseEnvelope[T]":
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, exc: AIServiceError) -> "ResponseEnvelope[Any]":
        """Wrap a domain exception as an unsuccessful response."""

        return cls(success=False, data=None, error=ErrorDetail.from_exception(exc))


__all__ = ("ErrorCode", "ErrorDetail", "ResponseEnvelope")
