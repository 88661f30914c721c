"""Tests for the chunked paper solver."""

from __future__ import annotations

import json
import re

import httpx
import pytest

from docgen.core.ai.chunking import chunk_text
from docgen.core.ai.config import AIAdapterSettings
from docgen.core.ai.exceptions import ChunkParseError, InvalidRequestError
from docgen.core.ai.gateway import CompletionGateway
from docgen.core.ai.prompts import PAPER_SOLVER_INSTRUCTION
from docgen.core.ai.types import ProviderName, SolutionItem
from docgen.services.paper_solver import PaperSolver, parse_chunk_solutions, renumber

from fakes import body, groq_reply

_SEGMENT = re.compile(r"^Segment (\d+)/(\d+) of Paper:\n")


def _solutions(count: int, *, start: int = 1) -> str:
    return json.dumps(
        {
            "solutions": [
                {
                    "question_no": start + offset,
                    "question": f"Q{start + offset}",
                    "answer": "42",
                    "explanation": "because",
                }
                for offset in range(count)
            ]
        }
    )


def _solver_gateway(replies: dict[int, httpx.Response], captured: list[httpx.Request]) -> CompletionGateway:
    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        segment = int(_SEGMENT.match(body(request)["messages"][-1]["content"]).group(1))
        return replies[segment]

    config = AIAdapterSettings.model_validate({"groq": {"api_key": "k"}, "fallback_order": ["groq"]})
    return CompletionGateway(config, transport_overrides={ProviderName.GROQ: httpx.MockTransport(handler)})


def test_chunk_text_windows() -> None:
    chunks = chunk_text("a" * 15_500, 6000)

    assert [len(chunk.text) for chunk in chunks] == [6000, 6000, 3500]
    assert [chunk.source_offset for chunk in chunks] == [0, 6000, 12000]
    assert [chunk.sequence_index for chunk in chunks] == [0, 1, 2]


@pytest.mark.parametrize("length", [1, 5999, 6000, 6001, 18000])
def test_chunk_text_reassembles_input(length: int) -> None:
    content = "".join(chr(ord("a") + index % 26) for index in range(length))
    chunks = chunk_text(content, 6000)

    assert "".join(chunk.text for chunk in chunks) == content
    assert all(0 < len(chunk.text) <= 6000 for chunk in chunks)


def test_chunk_text_rejects_non_positive_limit() -> None:
    with pytest.raises(ValueError):
        chunk_text("abc", 0)


def test_parse_chunk_solutions_coerces_fields() -> None:
    items = parse_chunk_solutions(
        json.dumps(
            {
                "solutions": [
                    {"question_no": "3", "question": "Q", "answer": {"x": 1}, "explanation": None},
                    {"question": "no number", "answer": 7, "extra": "ignored"},
                ]
            }
        )
    )

    assert items[0] == SolutionItem(ordinal=3, prompt_fragment="Q", answer='{"x": 1}', rationale="")
    assert items[1].ordinal == 0
    assert items[1].answer == "7"


@pytest.mark.parametrize("number", ["Infinity", "-Infinity", "NaN", "1e999"])
def test_parse_chunk_solutions_tolerates_non_finite_numbers(number: str) -> None:
    content = (
        '{"solutions": [{"question_no": %s, "question": "Q", "answer": "A", "explanation": "E"}]}'
        % number
    )

    items = parse_chunk_solutions(content)

    assert items == [SolutionItem(ordinal=0, prompt_fragment="Q", answer="A", rationale="E")]


@pytest.mark.parametrize("content", ["not json", "[]", '{"answers": []}', '{"solutions": "none"}'])
def test_parse_chunk_solutions_rejects_bad_output(content: str) -> None:
    with pytest.raises(ChunkParseError):
        parse_chunk_solutions(content)


@pytest.mark.parametrize("sizes", [[0], [3], [2, 0, 4], [0, 0, 1], [5, 5, 5, 5]])
def test_renumber_yields_dense_ordinals(sizes: list[int]) -> None:
    items: list[SolutionItem] = []
    for size in sizes:
        items.extend(
            SolutionItem(ordinal=1, prompt_fragment="q", answer="a", rationale="r") for _ in range(size)
        )

    renumbered = renumber(items)

    assert [item.ordinal for item in renumbered] == list(range(1, sum(sizes) + 1))


@pytest.mark.asyncio
async def test_solver_merges_chunks_and_drops_unparseable_chunk() -> None:
    captured: list[httpx.Request] = []
    replies = {
        1: groq_reply(_solutions(2)),
        2: groq_reply("Sorry, I cannot help with that."),
        3: groq_reply(_solutions(3, start=1)),
    }

    async with _solver_gateway(replies, captured) as gateway:
        solutions = await PaperSolver(gateway).solve("x" * 15_500)

    assert [item.ordinal for item in solutions] == [1, 2, 3, 4, 5]
    assert [item.prompt_fragment for item in solutions] == ["Q1", "Q2", "Q1", "Q2", "Q3"]
    assert len(captured) == 3

    first = body(captured[0])
    assert first["model"] == "llama-3.3-70b-versatile"
    assert first["temperature"] == 0.1
    assert first["max_tokens"] == 8000
    assert first["response_format"] == {"type": "json_object"}
    assert first["messages"][0] == {"role": "system", "content": PAPER_SOLVER_INSTRUCTION}
    assert first["messages"][1]["content"] == "Segment 1/3 of Paper:\n" + "x" * 6000


@pytest.mark.asyncio
async def test_infinite_question_number_does_not_abort_the_paper() -> None:
    captured: list[httpx.Request] = []
    replies = {
        1: groq_reply(
            '{"solutions": [{"question_no": Infinity, "question": "Q1", "answer": "A", "explanation": "E"}]}'
        ),
        2: groq_reply(_solutions(1, start=2)),
    }

    async with _solver_gateway(replies, captured) as gateway:
        solutions = await PaperSolver(gateway).solve("w" * 7000)

    assert [item.ordinal for item in solutions] == [1, 2]
    assert [item.prompt_fragment for item in solutions] == ["Q1", "Q2"]
    assert len(captured) == 2


@pytest.mark.asyncio
async def test_exhausted_chunk_contributes_nothing() -> None:
    captured: list[httpx.Request] = []
    replies = {
        1: groq_reply(_solutions(1)),
        2: httpx.Response(429, json={"error": {"message": "Rate limit exceeded"}}),
        3: groq_reply(_solutions(2)),
    }

    async with _solver_gateway(replies, captured) as gateway:
        solutions = await PaperSolver(gateway).solve("y" * 15_500)

    assert [item.ordinal for item in solutions] == [1, 2, 3]
    assert len(captured) == 3


@pytest.mark.asyncio
async def test_solver_uses_configured_chunk_size() -> None:
    captured: list[httpx.Request] = []
    replies = {index: groq_reply(_solutions(1)) for index in range(1, 5)}

    async with _solver_gateway(replies, captured) as gateway:
        gateway.config.solver.chunk_size = 10
        solutions = await PaperSolver(gateway).solve("z" * 35)

    assert len(solutions) == 4
    assert body(captured[-1])["messages"][1]["content"] == "Segment 4/4 of Paper:\nzzzzz"


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   \n\t"])
async def test_blank_paper_is_rejected(text: str) -> None:
    captured: list[httpx.Request] = []

    async with _solver_gateway({}, captured) as gateway:
        with pytest.raises(InvalidRequestError):
            await PaperSolver(gateway).solve(text)

    assert captured == []


@pytest.mark.asyncio
async def test_unknown_preferred_provider_is_rejected_before_any_call() -> None:
    captured: list[httpx.Request] = []

    async with _solver_gateway({}, captured) as gateway:
        with pytest.raises(InvalidRequestError):
            await PaperSolver(gateway).solve("question 1", preferred_provider="nope")

    assert captured == []
