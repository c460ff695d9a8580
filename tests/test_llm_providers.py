"""Tests for the model providers.

The Gemini and OpenAI client classes are monkeypatched so the
providers can be exercised without credentials or network access.
"""

from __future__ import annotations

import sys
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest  # type: ignore

from schoolflow.errors import ConfigurationMissing
from schoolflow.normalize.parse_response import normalize
from schoolflow.search.llm_providers import GeminiProvider, OpenAIProvider, PlaceholderProvider


def test_placeholder_reply_normalizes() -> None:
    provider = PlaceholderProvider(count=5)
    schools = normalize(provider.generate("schools near 1 Main"), strict=True)
    assert len(schools) == 5
    for school in schools:
        assert 100 <= school.student_count <= 3000
        assert school.phone_number.startswith("555-")
        assert school.manager_email.startswith("office@")


def test_placeholder_is_deterministic_per_prompt() -> None:
    provider = PlaceholderProvider(count=3)
    assert provider.generate("near A") == provider.generate("near A")
    assert provider.generate("near A") != provider.generate("near B")


def test_openai_provider_calls_chat_completions(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: List[Dict[str, Any]] = []

    class FakeCompletions:
        def create(self, **kwargs: Any) -> Any:
            calls.append(kwargs)
            message = SimpleNamespace(content='[{"name": "A"}]')
            return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    class FakeOpenAI:
        def __init__(self, api_key: str) -> None:
            self.api_key = api_key
            self.chat = SimpleNamespace(completions=FakeCompletions())

    monkeypatch.setattr("openai.OpenAI", FakeOpenAI)
    provider = OpenAIProvider("o-key", temperature=0.5)
    assert provider.client.api_key == "o-key"
    assert provider.generate("hello") == '[{"name": "A"}]'
    assert calls[0]["model"] == "gpt-4o-mini"
    assert calls[0]["temperature"] == 0.5
    assert calls[0]["messages"] == [{"role": "user", "content": "hello"}]


def test_openai_provider_none_content(monkeypatch: pytest.MonkeyPatch) -> None:
    class FakeOpenAI:
        def __init__(self, api_key: str) -> None:
            message = SimpleNamespace(content=None)
            response = SimpleNamespace(choices=[SimpleNamespace(message=message)])
            completions = SimpleNamespace(create=lambda **kwargs: response)
            self.chat = SimpleNamespace(completions=completions)

    monkeypatch.setattr("openai.OpenAI", FakeOpenAI)
    assert OpenAIProvider("o-key").generate("hello") == ""


class _FakeGeminiResponse:
    def __init__(self, text: Any) -> None:
        self._text = text

    @property
    def text(self) -> str:
        if isinstance(self._text, Exception):
            raise self._text
        return self._text


def _patch_gemini(monkeypatch: pytest.MonkeyPatch, reply: Any) -> Dict[str, Any]:
    seen: Dict[str, Any] = {}

    class FakeModel:
        def __init__(self, model_name: str, generation_config: Dict[str, Any] | None = None) -> None:
            seen["model_name"] = model_name
            seen["generation_config"] = generation_config

        def generate_content(self, prompt: str) -> _FakeGeminiResponse:
            seen["prompt"] = prompt
            return _FakeGeminiResponse(reply)

    monkeypatch.setattr("google.generativeai.configure", lambda api_key: seen.setdefault("api_key", api_key))
    monkeypatch.setattr("google.generativeai.GenerativeModel", FakeModel)
    return seen


def test_gemini_provider_requests_json(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = _patch_gemini(monkeypatch, "[]")
    provider = GeminiProvider("g-key", model="gemini-test", temperature=0.8)
    assert provider.generate("find schools") == "[]"
    assert seen["api_key"] == "g-key"
    assert seen["model_name"] == "gemini-test"
    assert seen["generation_config"] == {"response_mime_type": "application/json", "temperature": 0.8}
    assert seen["prompt"] == "find schools"


def test_gemini_blocked_reply_is_empty(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_gemini(monkeypatch, ValueError("no text parts"))
    assert GeminiProvider("g-key").generate("find schools") == ""


def test_gemini_missing_library_is_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "google.generativeai", None)
    with pytest.raises(ConfigurationMissing, match="google-generativeai"):
        GeminiProvider("g-key")


def test_gemini_model_load_failure_is_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_model(*args: Any, **kwargs: Any) -> None:
        raise ValueError("unknown model")

    monkeypatch.setattr("google.generativeai.configure", lambda api_key: None)
    monkeypatch.setattr("google.generativeai.GenerativeModel", broken_model)
    with pytest.raises(ConfigurationMissing, match="Failed to load Gemini model"):
        GeminiProvider("g-key", model="gemini-nope")


def test_openai_missing_library_is_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "openai", None)
    with pytest.raises(ConfigurationMissing, match="openai package"):
        OpenAIProvider("o-key")
