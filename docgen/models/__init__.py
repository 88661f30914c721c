"""Shared Pydantic models used across the application."""

from .common import ErrorDetail, ResponseEnvelope
from .completion import CompletionPayload, CompletionResponse, MessagePayload
from .solver import PaperSolveRequest, PaperSolveResponse, SolutionPayload

__all__ = (
    "ErrorDetail",
    "ResponseEnvelope",
    "CompletionPayload",
    "CompletionResponse",
    "MessagePayload",
    "PaperSolveRequest",
    "PaperSolveResponse",
    "SolutionPayload",
)
