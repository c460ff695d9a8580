"""
Error types raised by SchoolRadar.

Every failure that reaches the user derives from `SchoolDataError` so
the CLI and the session object can report a single readable message
instead of a traceback.  Subclasses carry the diagnostics relevant to
their stage (a text excerpt for unparseable replies, the offending
index for strict-mode validation failures).
"""

from __future__ import annotations

from typing import Dict, Optional


class SchoolDataError(Exception):
    """Base class for user-facing errors."""


class ConfigurationMissing(SchoolDataError):
    """No credential (or an unusable provider name) for the model call."""


class ProviderError(SchoolDataError):
    """The generative model call itself failed."""


class EmptyResponse(SchoolDataError):
    """The model returned no text at all."""

    def __init__(self, message: str = "Received an empty response from the AI.") -> None:
        super().__init__(message)


class MalformedJson(SchoolDataError):
    """The reply is not valid JSON even after cleanup."""

    def __init__(self, excerpt: str, detail: Optional[str] = None) -> None:
        self.excerpt = excerpt
        self.detail = detail
        message = "Could not understand the AI's response. It wasn't valid JSON."
        if detail:
            message += f" ({detail})"
        message += f" Raw after cleaning: {excerpt}..."
        super().__init__(message)


class UnexpectedShape(SchoolDataError):
    """The reply is valid JSON but not a list of schools."""

    def __init__(self, found: str) -> None:
        self.found = found
        super().__init__(f"AI response was not a list of schools as expected (got {found}).")


class InvalidEntry(SchoolDataError):
    """A school entry failed required-field validation (strict mode)."""

    def __init__(self, index: int, fields: Dict[str, object]) -> None:
        self.index = index
        self.fields = fields
        seen = ", ".join(f"{key}: {value!r}" for key, value in fields.items())
        super().__init__(
            f"AI returned an invalid school data structure for item at index {index}. {seen}"
        )
