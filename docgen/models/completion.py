"""Request and response models for completion endpoints."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from docgen.core.ai.types import (
    CompletionRequest,
    ContentPart,
    ImagePart,
    MessageRole,
    PromptMessage,
    ProviderName,
    ResponseFormat,
    TextPart,
)


class TextPartPayload(BaseModel):
    """Text fragment of a multi-part message."""

    type: Literal["text"] = "text"
    text: str


class ImageUrl(BaseModel):
    url: str = Field(..., description="data:<mime>;base64,<payload> URL")


class ImagePartPayload(BaseModel):
    """Inline image fragment of a multi-part message."""

    type: Literal["image_url"] = "image_url"
    image_url: ImageUrl


ContentPartPayload = Annotated[
    Union[TextPartPayload, ImagePartPayload], Field(discriminator="type")
]


class MessagePayload(BaseModel):
    """A single chat message."""

    role: MessageRole
    content: str | list[ContentPartPayload]

    def to_message(self) -> PromptMessage:
        if isinstance(self.content, str):
            return PromptMessage(role=self.role, content=self.content)
        parts: list[ContentPart] = [
            TextPart(text=part.text)
            if isinstance(part, TextPartPayload)
            else ImagePart(url=part.image_url.url)
            for part in self.content
        ]
        return PromptMessage(role=self.role, content=parts)


class CompletionPayload(BaseModel):
    """Inbound completion request."""

    messages: list[MessagePayload] = Field(..., min_length=1)
    model: str | None = Field(default=None, description="Optional model hint")
    temperature: float = Field(0.7, ge=0, le=2)
    max_tokens: int = Field(4096, gt=0)
    response_format: ResponseFormat = Field(default=ResponseFormat.TEXT)
    provider: str | None = Field(
        default=None,
        description="Provider to force, or 'auto' for the configured default",
    )
    web_search: bool = Field(default=False)

    def to_request(self) -> CompletionRequest:
        return CompletionRequest(
            messages=[message.to_message() for message in self.messages],
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            response_format=self.response_format,
            forced_provider=self.provider,
            web_search=self.web_search,
        )


class CompletionResponse(BaseModel):
    """Outbound completion result."""

    text: str
    provider: ProviderName
    model: str
    attempts: int = Field(1, ge=1)


__all__ = [
    "CompletionPayload",
    "CompletionResponse",
    "ImagePartPayload",
    "MessagePayload",
    "TextPartPayload",
]
