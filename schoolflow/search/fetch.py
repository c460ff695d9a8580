"""
School search service.

Builds the prompt for an address, sends it to the configured provider
and normalizes the reply.  A failed call surfaces once as a single
error; there are no retries.
"""

from __future__ import annotations

import logging
from typing import List

from ..errors import EmptyResponse, ProviderError, SchoolDataError
from ..normalize.parse_response import normalize
from ..normalize.schema import SchoolRecord
from .llm_providers import LLMProvider
from .prompt import build_school_prompt

logger = logging.getLogger(__name__)


def fetch_schools_near_address(
    address: str,
    provider: LLMProvider,
    strict: bool = False,
    min_count: int = 10,
    max_count: int = 15,
) -> List[SchoolRecord]:
    """Ask the model for fictional schools near `address`.

    Args:
        address: Free-text street address; must not be blank.
        provider: Model provider to call.
        strict: Use strict validation when normalizing the reply.
        min_count: Lower bound of the requested number of schools.
        max_count: Upper bound of the requested number of schools.

    Returns:
        Validated school records, possibly empty.

    Raises:
        ValueError: `address` is blank.
        ProviderError: The model call failed.
        SchoolDataError: The reply was empty or could not be normalized.
    """
    if not address or not address.strip():
        raise ValueError("Please enter an address.")

    prompt = build_school_prompt(address.strip(), min_count=min_count, max_count=max_count)
    try:
        response_text = provider.generate(prompt)
    except SchoolDataError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error fetching schools from %s: %s", provider.__class__.__name__, exc)
        if "API key not valid" in str(exc):
            raise ProviderError(
                "The provided API key is not valid. Please check your configuration."
            ) from exc
        raise ProviderError(f"Failed to fetch school data from AI. {exc}") from exc

    if not response_text:
        raise EmptyResponse()

    schools = normalize(response_text, strict=strict)
    logger.info("Found %d schools near %s", len(schools), address.strip())
    return schools
