"""Per-provider model name resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .types import ProviderName


@dataclass(frozen=True, slots=True)
class ModelPolicy:
    """Rules deciding whether a requested model name suits a provider.

    A requested name is kept when it contains at least one of
    ``accepted_fragments`` (if any are listed) and none of
    ``rejected_fragments``. Otherwise the default model is used.
    """

    default: str
    accepted_fragments: tuple[str, ...] = ()
    rejected_fragments: tuple[str, ...] = ()

    def accepts(self, model: str) -> bool:
        lowered = model.lower()
        if self.accepted_fragments and not any(
            fragment in lowered for fragment in self.accepted_fragments
        ):
            return False
        return not any(fragment in lowered for fragment in self.rejected_fragments)


MODEL_POLICIES: Mapping[ProviderName, ModelPolicy] = {
    ProviderName.GROQ: ModelPolicy(
        default="llama-3.3-70b-versatile",
        accepted_fragments=("70b", "8b", "vision", "90b", "llama-4", "meta-llama"),
    ),
    ProviderName.GEMINI: ModelPolicy(
        default="gemini-flash-latest",
        accepted_fragments=("gemini",),
    ),
    ProviderName.OLLAMA: ModelPolicy(
        default="llama3.2:1b",
        rejected_fragments=("versatile", "gemini", "groq"),
    ),
    ProviderName.KIMI: ModelPolicy(
        default="moonshot-v1-128k",
        rejected_fragments=("llama", "mixtral"),
    ),
}


def resolve_model(
    provider: ProviderName,
    requested: str | None,
    *,
    default: str | None = None,
) -> str:
    """Return the concrete model identifier to send to *provider*.

    Never raises and never returns an empty string: unknown or unsuitable
    names degrade to the provider default (or *default* when configured).
    """

    policy = MODEL_POLICIES[provider]
    fallback = (default or "").strip() or policy.default
    candidate = (requested or "").strip()
    if not candidate or not policy.accepts(candidate):
        return fallback
    return candidate


__all__ = ("MODEL_POLICIES", "ModelPolicy", "resolve_model")
