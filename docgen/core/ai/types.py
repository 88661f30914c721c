"""Common types for AI provider adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Sequence, Union


class ProviderName(str, Enum):
    """Supported AI provider identifiers."""

    GROQ = "groq"
    GEMINI = "gemini"
    OLLAMA = "ollama"
    KIMI = "kimi"


class ResponseFormat(str, Enum):
    """Output contract requested from a provider."""

    TEXT = "text"
    JSON = "json"


MessageRole = Literal["system", "user", "assistant"]

AUTO_PROVIDER = "auto"


@dataclass(frozen=True, slots=True)
class TextPart:
    """Plain text fragment of a multi-part message."""

    text: str


@dataclass(frozen=True, slots=True)
class ImagePart:
    """Inline image attached to a multi-part message.

    ``url`` is a ``data:<mime>;base64,<payload>`` URL.
    """

    url: str

    @property
    def mime_type(self) -> str:
        header = self.url.split(",", 1)[0]
        if header.startswith("data:"):
            return header[5:].split(";", 1)[0] or "application/octet-stream"
        return "application/octet-stream"

    @property
    def data(self) -> str:
        """Return the raw base64 payload without the data URL header."""

        if self.url.startswith("data:") and "," in self.url:
            return self.url.split(",", 1)[1]
        return self.url


ContentPart = Union[TextPart, ImagePart]
MessageContent = Union[str, Sequence[ContentPart]]


@dataclass(slots=True)
class PromptMessage:
    """A single message in a prompt exchange."""

    role: MessageRole
    content: MessageContent

    @property
    def text(self) -> str:
        """Return the textual content, joining text parts for multi-part messages."""

        if isinstance(self.content, str):
            return self.content
        return "\n".join(part.text for part in self.content if isinstance(part, TextPart))

    @property
    def images(self) -> list[ImagePart]:
        if isinstance(self.content, str):
            return []
        return [part for part in self.content if isinstance(part, ImagePart)]


@dataclass(slots=True)
class CompletionRequest:
    """Provider agnostic completion request handled by the gateway."""

    messages: Sequence[PromptMessage]
    model: str | None = None
    temperature: float = 0.7
    max_tokens: int = 4096
    response_format: ResponseFormat = ResponseFormat.TEXT
    forced_provider: str | None = None
    web_search: bool = False


@dataclass(slots=True)
class CompletionResult:
    """Canonical response returned by the gateway."""

    text: str
    provider: ProviderName
    model: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Chunk:
    """Fixed-size window of a larger document."""

    sequence_index: int
    source_offset: int
    text: str


@dataclass(slots=True)
class SolutionItem:
    """A single solved question produced by the paper solver."""

    ordinal: int
    prompt_fragment: str
    answer: str
    rationale: str


__all__ = (
    "AUTO_PROVIDER",
    "Chunk",
    "CompletionRequest",
    "CompletionResult",
    "ContentPart",
    "ImagePart",
    "MessageContent",
    "MessageRole",
    "PromptMessage",
    "ProviderName",
    "ResponseFormat",
    "SolutionItem",
    "TextPart",
)
