"""Tests for the web search augmentation stage."""

from __future__ import annotations

import httpx
import pytest

from docgen.core.ai.config import AIAdapterSettings, SearchSettings
from docgen.core.ai.gateway import CompletionGateway
from docgen.core.ai.search import SearchAugmenter, SerperSearchClient
from docgen.core.ai.types import CompletionRequest, ImagePart, PromptMessage, ProviderName, TextPart

from fakes import body, groq_reply

SEARCH_RESULTS = {
    "organic": [
        {"title": "Election night", "snippet": "Results are in."},
        {"title": "Analysis", "snippet": "Turnout was high."},
    ]
}


def _request(content: object = "Who won the election?", *, web_search: bool = True) -> CompletionRequest:
    return CompletionRequest(
        messages=[PromptMessage(role="user", content=content)],
        web_search=web_search,
    )


def _augmenter(handler, *, api_key: str | None = "serper-key") -> SearchAugmenter:
    client = SerperSearchClient(
        SearchSettings(api_key=api_key),
        transport=httpx.MockTransport(handler),
    )
    return SearchAugmenter(client)


@pytest.mark.asyncio
async def test_search_context_replaces_last_message() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json=SEARCH_RESULTS)

    augmenter = _augmenter(handler)
    request = _request()
    try:
        augmented = await augmenter.augment(request, ProviderName.GROQ)
    finally:
        await augmenter.aclose()

    assert captured[0].url.path == "/search"
    assert captured[0].headers["X-API-KEY"] == "serper-key"
    assert body(captured[0]) == {"q": "Who won the election?", "num": 3}
    assert augmented is not request
    assert request.messages[0].content == "Who won the election?"
    assert augmented.messages[-1].content == (
        "User Query: Who won the election?\n\n"
        "[SYSTEM INJECTED REAL-TIME CONTEXT FROM WEB SEARCH]\n"
        "Real-Time Search Results:\n"
        "Election night: Results are in.\n"
        "Analysis: Turnout was high.\n\n"
        "INSTRUCTIONS: Use the above real-time context to answer."
    )


@pytest.mark.asyncio
async def test_multipart_message_keeps_images() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=SEARCH_RESULTS)

    image = ImagePart(url="data:image/png;base64,AAAA")
    augmenter = _augmenter(handler)
    try:
        augmented = await augmenter.augment(
            _request([TextPart(text="What is on this chart?"), image]),
            ProviderName.KIMI,
        )
    finally:
        await augmenter.aclose()

    parts = augmented.messages[-1].content
    assert isinstance(parts[0], TextPart)
    assert parts[0].text.startswith("User Query: What is on this chart?")
    assert parts[1:] == [image]


@pytest.mark.asyncio
@pytest.mark.parametrize("provider", [ProviderName.GEMINI, ProviderName.OLLAMA])
async def test_exempt_providers_are_not_augmented(provider: ProviderName) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=SEARCH_RESULTS)

    augmenter = _augmenter(handler)
    request = _request()
    try:
        assert await augmenter.augment(request, provider) is request
    finally:
        await augmenter.aclose()

    assert calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "outcome",
    ["server_error", "invalid_json", "transport_error", "no_results", "missing_key"],
)
async def test_search_failures_leave_request_unchanged(outcome: str) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if outcome == "server_error":
            return httpx.Response(500, json={"message": "boom"})
        if outcome == "invalid_json":
            return httpx.Response(200, content=b"not json")
        if outcome == "transport_error":
            raise httpx.ConnectError("unreachable", request=request)
        return httpx.Response(200, json={"organic": []})

    augmenter = _augmenter(handler, api_key=None if outcome == "missing_key" else "serper-key")
    request = _request()
    try:
        assert await augmenter.augment(request, ProviderName.GROQ) is request
    finally:
        await augmenter.aclose()


@pytest.mark.asyncio
async def test_failed_search_sends_same_bytes_as_unaugmented_request() -> None:
    sent: list[bytes] = []

    def groq_handler(request: httpx.Request) -> httpx.Response:
        sent.append(request.content)
        return groq_reply("answer")

    def search_handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    config = AIAdapterSettings.model_validate(
        {"groq": {"api_key": "k"}, "search": {"api_key": "serper-key"}}
    )
    async with CompletionGateway(
        config,
        transport_overrides={ProviderName.GROQ: httpx.MockTransport(groq_handler)},
        search_transport=httpx.MockTransport(search_handler),
    ) as gateway:
        await gateway.complete(_request(web_search=True))
        await gateway.complete(_request(web_search=False))

    assert len(sent) == 2
    assert sent[0] == sent[1]


@pytest.mark.asyncio
async def test_gateway_sends_augmented_prompt_to_cloud_provider() -> None:
    captured: list[httpx.Request] = []

    def groq_handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return groq_reply("answer")

    def search_handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=SEARCH_RESULTS)

    config = AIAdapterSettings.model_validate(
        {"groq": {"api_key": "k"}, "search": {"api_key": "serper-key"}}
    )
    async with CompletionGateway(
        config,
        transport_overrides={ProviderName.GROQ: httpx.MockTransport(groq_handler)},
        search_transport=httpx.MockTransport(search_handler),
    ) as gateway:
        await gateway.complete(_request())

    content = body(captured[0])["messages"][-1]["content"]
    assert "[SYSTEM INJECTED REAL-TIME CONTEXT FROM WEB SEARCH]" in content
    assert "Election night: Results are in." in content
