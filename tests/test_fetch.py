"""Tests for the school search service.

A fake provider stands in for the model so the prompt handling,
error wrapping and normalization wiring can be checked without any
network access.
"""

from __future__ import annotations

import json
from typing import List, Optional

import pytest  # type: ignore

from schoolflow.errors import EmptyResponse, InvalidEntry, MalformedJson, ProviderError
from schoolflow.search.fetch import fetch_schools_near_address
from schoolflow.search.llm_providers import LLMProvider

SCHOOLS = [
    {"name": "Sunnyvale Elementary", "address": "1 Elm Street", "type": "Elementary School", "studentCount": 320},
    {"name": "Northwood High", "address": "2 Oak Avenue", "type": "High School", "studentCount": 1500},
    {"address": "3 Pine Road", "type": "Middle School", "studentCount": 600},
]


class FakeProvider(LLMProvider):
    """Provider returning a fixed reply and recording prompts."""

    def __init__(self, reply: str = "", error: Optional[Exception] = None) -> None:
        self.reply = reply
        self.error = error
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


def test_fetch_returns_valid_records() -> None:
    provider = FakeProvider("```json\n" + json.dumps(SCHOOLS) + "\n```")
    schools = fetch_schools_near_address("  221B Baker Street  ", provider)
    assert [s.name for s in schools] == ["Sunnyvale Elementary", "Northwood High"]
    assert len(provider.prompts) == 1
    assert '"221B Baker Street"' in provider.prompts[0]


def test_prompt_names_fields_and_quantity() -> None:
    provider = FakeProvider("[]")
    fetch_schools_near_address("1 Main", provider, min_count=35, max_count=40)
    prompt = provider.prompts[0]
    for key in ("name", "address", "type", "studentCount", "phoneNumber", "principalName",
                "assistantName", "managerEmail", "assistantEmail"):
        assert key in prompt
    assert "around 35 to 40" in prompt
    assert "JSON array" in prompt


@pytest.mark.parametrize("address", ["", "   "])
def test_blank_address_is_rejected_before_calling(address: str) -> None:
    provider = FakeProvider("[]")
    with pytest.raises(ValueError):
        fetch_schools_near_address(address, provider)
    assert provider.prompts == []


def test_empty_reply_is_reported() -> None:
    with pytest.raises(EmptyResponse):
        fetch_schools_near_address("1 Main", FakeProvider(""))


def test_provider_failure_is_wrapped() -> None:
    provider = FakeProvider(error=RuntimeError("503 Service Unavailable"))
    with pytest.raises(ProviderError) as excinfo:
        fetch_schools_near_address("1 Main", provider)
    assert str(excinfo.value).startswith("Failed to fetch school data from AI.")
    assert "503" in str(excinfo.value)
    assert len(provider.prompts) == 1


def test_invalid_api_key_has_dedicated_message() -> None:
    provider = FakeProvider(error=RuntimeError("400 API key not valid. Please pass a valid API key."))
    with pytest.raises(ProviderError, match="API key is not valid"):
        fetch_schools_near_address("1 Main", provider)


def test_normalizer_errors_propagate() -> None:
    with pytest.raises(MalformedJson):
        fetch_schools_near_address("1 Main", FakeProvider("Sorry, I cannot help with that."))


def test_strict_mode_is_passed_through() -> None:
    provider = FakeProvider(json.dumps(SCHOOLS))
    with pytest.raises(InvalidEntry) as excinfo:
        fetch_schools_near_address("1 Main", provider, strict=True)
    assert excinfo.value.index == 2
