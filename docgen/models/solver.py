"""Request and response models for the paper solver endpoint."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, field_validator


class PaperSolveRequest(BaseModel):
    """Payload carrying the full text of a question paper."""

    paper_text: str = Field(..., description="Extracted text of the paper to solve")
    preferred_provider: str = Field(
        default="auto",
        description="Provider tried first for every segment, or 'auto'",
    )

    @field_validator("paper_text")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("paper_text cannot be blank")
        return value


class SolutionPayload(BaseModel):
    """A single solved question."""

    question_no: int = Field(..., ge=1, description="Sequential question number starting at 1")
    question: str = Field(...)
    answer: str = Field(...)
    explanation: str = Field(...)


class PaperSolveResponse(BaseModel):
    """Merged solutions for the whole paper."""

    total: int = Field(..., ge=0)
    solutions: List[SolutionPayload] = Field(default_factory=list)


__all__ = [
    "PaperSolveRequest",
    "PaperSolveResponse",
    "SolutionPayload",
]
