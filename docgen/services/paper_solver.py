"""Chunked question-paper solver built on the completion gateway."""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ..core.ai.chunking import chunk_text
from ..core.ai.config import SolverSettings
from ..core.ai.exceptions import AIServiceError, ChunkParseError, InvalidRequestError
from ..core.ai.gateway import CompletionGateway
from ..core.ai.prompts import PAPER_SOLVER_INSTRUCTION, segment_prompt
from ..core.ai.types import (
    Chunk,
    CompletionRequest,
    PromptMessage,
    ResponseFormat,
    SolutionItem,
)

__all__ = ["PaperSolver", "parse_chunk_solutions", "renumber"]

logger = logging.getLogger(__name__)


class _RawSolution(BaseModel):
    model_config = ConfigDict(extra="ignore")

    question_no: Any = None
    question: str = ""
    answer: str = ""
    explanation: str = ""

    @field_validator("question", "answer", "explanation", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (dict, list)):
            return json.dumps(value, ensure_ascii=False)
        if not isinstance(value, str):
            return str(value)
        return value


class _ChunkPayload(BaseModel):
    solutions: list[_RawSolution]


def parse_chunk_solutions(content: str) -> list[SolutionItem]:
    """Parse a chunk's model output into solution items.

    Ordinals keep whatever the model emitted (0 when absent); they are
    reassigned by :func:`renumber` after merging.
    """

    try:
        data = json.loads(content)
    except (TypeError, ValueError) as exc:
        raise ChunkParseError("Chunk output is not valid JSON") from exc

    try:
        payload = _ChunkPayload.model_validate(data)
    except ValidationError as exc:
        raise ChunkParseError("Chunk output does not contain a 'solutions' array") from exc

    items: list[SolutionItem] = []
    for raw in payload.solutions:
        try:
            ordinal = int(raw.question_no)
        except (TypeError, ValueError, OverflowError):
            ordinal = 0
        items.append(
            SolutionItem(
                ordinal=ordinal,
                prompt_fragment=raw.question,
                answer=raw.answer,
                rationale=raw.explanation,
            )
        )
    return items


def renumber(items: list[SolutionItem]) -> list[SolutionItem]:
    """Overwrite ordinals with each item's 1-based position."""

    for position, item in enumerate(items, start=1):
        item.ordinal = position
    return items


class PaperSolver:
    """Solves every question of a long paper, one fixed-size segment at a time."""

    def __init__(self, gateway: CompletionGateway, settings: SolverSettings | None = None) -> None:
        self._gateway = gateway
        self._settings = settings or gateway.config.solver

    @property
    def settings(self) -> SolverSettings:
        return self._settings

    async def solve(self, text: str, preferred_provider: str | None = None) -> list[SolutionItem]:
        """Return the merged, densely numbered solutions for *text*.

        Chunks are processed sequentially. A chunk whose provider chain is
        exhausted or whose output cannot be parsed contributes no items.
        """

        if not text or not text.strip():
            raise InvalidRequestError("No valid paper content provided")
        # Rejects unknown provider names before any chunk is sent.
        self._gateway.candidate_chain(preferred_provider)

        chunks = chunk_text(text, self._settings.chunk_size)
        logger.info(
            "solver.start",
            extra={"chunk_count": len(chunks), "provider": preferred_provider or "auto"},
        )

        merged: list[SolutionItem] = []
        for chunk in chunks:
            merged.extend(await self._solve_chunk(chunk, len(chunks), preferred_provider))

        logger.info(
            "solver.complete",
            extra={"chunk_count": len(chunks), "solution_count": len(merged)},
        )
        return renumber(merged)

    async def _solve_chunk(
        self, chunk: Chunk, total: int, preferred_provider: str | None
    ) -> list[SolutionItem]:
        request = CompletionRequest(
            messages=[
                PromptMessage(role="system", content=PAPER_SOLVER_INSTRUCTION),
                PromptMessage(
                    role="user",
                    content=segment_prompt(chunk.sequence_index + 1, total, chunk.text),
                ),
            ],
            model=self._settings.model,
            temperature=self._settings.temperature,
            max_tokens=self._settings.max_tokens,
            response_format=ResponseFormat.JSON,
            forced_provider=preferred_provider,
        )
        try:
            result = await self._gateway.complete_with_fallback(request)
            items = parse_chunk_solutions(result.text)
        except InvalidRequestError:
            raise
        except AIServiceError as exc:
            logger.warning(
                "solver.chunk.failure",
                extra={
                    "chunk_index": chunk.sequence_index,
                    "chunk_count": total,
                    "error": str(exc),
                },
            )
            return []

        logger.info(
            "solver.chunk.success",
            extra={
                "chunk_index": chunk.sequence_index,
                "chunk_count": total,
                "solution_count": len(items),
                "provider": result.provider.value,
            },
        )
        return items
