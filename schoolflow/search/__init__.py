"""
Search subsystem for SchoolRadar.

* `llm_providers` - Gemini, OpenAI and placeholder model providers
  behind a single `generate(prompt)` interface.
* `prompt` - Builds the instruction describing the JSON shape wanted.
* `fetch` - Runs one search: prompt, model call, normalization.
"""

from .llm_providers import LLMProvider, build_provider  # noqa: F401
from .fetch import fetch_schools_near_address  # noqa: F401
