"""
LLM provider abstractions.

This module defines a common interface for the generative models used
by SchoolRadar to invent fictional schools near an address.  The only
operation the rest of the package relies on is `generate`, which sends
a natural-language instruction and returns the raw reply text.

Concrete implementations are provided for Gemini (Google Generative
AI, the default) and OpenAI.  A placeholder implementation returns
canned fictional data without any network access; it is only used when
selected explicitly (``provider: placeholder``), never as a silent
fallback for a missing key.

Providers receive their API key from `Settings`; they do not read the
environment themselves.
"""

from __future__ import annotations

import json
import logging
import random
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from ..config import Settings
from ..errors import ConfigurationMissing

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Send `prompt` to the model and return its raw text reply.

        Implementations let transport and API errors propagate; the
        search service wraps them into a `ProviderError`.
        """
        raise NotImplementedError


class PlaceholderProvider(LLMProvider):
    """Offline provider returning deterministic fictional schools."""

    _PREFIXES = ["Sunnyvale", "Northwood", "Maple Grove", "Riverside", "Cedar Hill", "Lakeview", "Oak Ridge", "Pinecrest"]
    _TYPES = ["Elementary School", "Middle School", "High School", "K-12 School", "Charter School"]
    _STREETS = ["Elm Street", "Oak Avenue", "Pine Road", "Birch Lane", "Willow Way", "Chestnut Drive"]
    _FIRST = ["Eleanor", "David", "Maria", "James", "Priya", "Samuel", "Grace", "Luis"]
    _LAST = ["Vance", "Lee", "Garcia", "Okafor", "Patel", "Brooks", "Nguyen", "Hart"]

    def __init__(self, count: int = 12, seed: Optional[int] = None) -> None:
        self.count = count
        self.seed = seed

    def generate(self, prompt: str) -> str:
        # Seeded from the prompt so the same address yields the same schools.
        rng = random.Random(self.seed if self.seed is not None else prompt)
        schools: List[Dict[str, object]] = []
        for i in range(self.count):
            prefix = self._PREFIXES[i % len(self._PREFIXES)]
            school_type = rng.choice(self._TYPES)
            slug = prefix.lower().replace(" ", "")
            principal_last = rng.choice(self._LAST)
            assistant_last = rng.choice(self._LAST)
            schools.append(
                {
                    "name": f"{prefix} {school_type.replace(' School', '')} Academy",
                    "address": f"{rng.randint(100, 9999)} {rng.choice(self._STREETS)}, Anytown, USA",
                    "type": school_type,
                    "studentCount": rng.randint(100, 3000),
                    "phoneNumber": f"555-{rng.randint(100, 999)}-{rng.randint(1000, 9999)}",
                    "principalName": f"Dr. {rng.choice(self._FIRST)} {principal_last}",
                    "assistantName": f"Mr. {rng.choice(self._FIRST)} {assistant_last}",
                    "managerEmail": f"office@{slug}.edu",
                    "assistantEmail": f"{assistant_last.lower()}@{slug}.edu",
                }
            )
        logger.debug("Placeholder provider generated %d schools", len(schools))
        return json.dumps(schools, indent=2)


class GeminiProvider(LLMProvider):
    """Provider that uses Google Generative AI (Gemini) via google-generativeai."""

    def __init__(self, api_key: Optional[str], model: Optional[str] = None, temperature: float = 0.8) -> None:
        if not api_key:
            raise ConfigurationMissing("Gemini API key is not configured. Cannot fetch school data.")
        try:
            import google.generativeai as genai  # type: ignore
        except ImportError as exc:
            raise ConfigurationMissing(
                "google-generativeai package is required for GeminiProvider. Install it via pip."
            ) from exc
        self.genai = genai
        self.model_name = model or DEFAULT_GEMINI_MODEL
        self.temperature = temperature
        self.genai.configure(api_key=api_key)
        try:
            self.model = self.genai.GenerativeModel(
                self.model_name,
                generation_config={
                    "response_mime_type": "application/json",
                    "temperature": self.temperature,
                },
            )
        except Exception as exc:
            raise ConfigurationMissing(f"Failed to load Gemini model {self.model_name}: {exc}") from exc

    def generate(self, prompt: str) -> str:
        logger.debug("Sending prompt to Gemini: %s", prompt[:200])
        response = self.model.generate_content(prompt)
        try:
            return response.text
        except ValueError as exc:
            # Raised when the reply has no text part (e.g. blocked by safety filters).
            logger.warning("Gemini returned no text: %s", exc)
            return ""


class OpenAIProvider(LLMProvider):
    """Provider that uses the OpenAI chat completions API."""

    def __init__(self, api_key: Optional[str], model: Optional[str] = None, temperature: float = 0.8) -> None:
        if not api_key:
            raise ConfigurationMissing("OPENAI_API_KEY not provided. Cannot fetch school data.")
        try:
            from openai import OpenAI  # type: ignore
        except ImportError as exc:
            raise ConfigurationMissing(
                "openai package is required for OpenAIProvider. Install it via pip."
            ) from exc
        self.client = OpenAI(api_key=api_key)
        self.model = model or DEFAULT_OPENAI_MODEL
        self.temperature = temperature

    def generate(self, prompt: str) -> str:
        logger.debug("Sending prompt to OpenAI: %s", prompt[:200])
        completion = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.temperature,
        )
        return completion.choices[0].message.content or ""


def build_provider(settings: Settings) -> LLMProvider:
    """Return the provider selected by `settings`.

    Raises:
        ConfigurationMissing: The provider needs an API key and none is
            configured, or the provider name is unknown.
    """
    name = settings.provider.lower()
    if name == "gemini":
        return GeminiProvider(settings.api_key, settings.model, settings.temperature)
    if name == "openai":
        return OpenAIProvider(settings.api_key, settings.model, settings.temperature)
    if name == "placeholder":
        logger.info("LLM_PROVIDER=placeholder; using placeholder provider")
        return PlaceholderProvider(count=settings.max_count)
    raise ConfigurationMissing(f"Unknown LLM provider '{settings.provider}'. Use gemini, openai or placeholder.")
