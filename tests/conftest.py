from __future__ import annotations

import pytest

from docgen.core.settings import get_settings

_PROVIDER_ENV = (
    "GROQ_API_KEY",
    "GROQ_BASE_URL",
    "GEMINI_API_KEY",
    "KIMI_API_KEY",
    "KIMI_BASE_URL",
    "OLLAMA_BASE_URL",
    "SERPER_API_KEY",
    "DEFAULT_AI_PROVIDER",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch):
    for name in _PROVIDER_ENV:
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(f"APP_{name}", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
