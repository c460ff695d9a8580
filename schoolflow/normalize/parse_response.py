"""
Model reply normalizer.

Generative models are asked to answer with a bare JSON array of school
objects, but they do not always comply.  This module turns the raw
reply text into a list of validated `SchoolRecord` instances:

1. strip a Markdown code fence that wraps the whole reply,
2. remove stray non-ASCII symbols the model sometimes inserts between
   a JSON value and the following `,`, `}` or `]`,
3. parse the result strictly with :func:`json.loads`,
4. check that it is a list and map each element to a record.

Two validation policies are supported.  The lenient policy (default)
substitutes placeholders for missing required fields and then drops
those entries, keeping the rest of the batch.  The strict policy fails
the whole call on the first invalid entry, which is mostly useful when
diagnosing prompt changes.

:func:`normalize` raises a :class:`~schoolflow.errors.SchoolDataError`
subclass on failure; :func:`parse_schools` returns a tagged result
instead for callers that prefer to branch on type.
"""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from ..errors import EmptyResponse, InvalidEntry, MalformedJson, SchoolDataError, UnexpectedShape
from .schema import OPTIONAL_FIELDS, REQUIRED_FIELDS, SchoolRecord

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 150
MAX_REPAIR_PASSES = 50

ADDRESS_PLACEHOLDER = "Address not provided"
TYPE_PLACEHOLDER = "Type not specified"

_FENCE_RE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)

# A JSON literal, number or string, then a run of non-ASCII characters,
# then (lookahead) the structural character that closes the value.
# Numbers may not start inside a run of digits, which keeps each pass linear.
_STRAY_TOKEN_RE = re.compile(
    r'(\b(?:true|false|null)\b|(?<![\w.])\d+(?:\.\d+)?(?:[eE][+-]?\d+)?|"(?:\\.|[^"\\])*")'
    r"\s*[^\x00-\x7F]+\s*(?=[,}\]])"
)


@dataclass(frozen=True)
class ValidRecordList:
    """Successful normalization."""

    records: List[SchoolRecord]


@dataclass(frozen=True)
class ParseFailure:
    """Failed normalization; `error` is the exception `normalize` would raise."""

    error: SchoolDataError

    @property
    def reason(self) -> str:
        return str(self.error)

    @property
    def excerpt(self) -> Optional[str]:
        return getattr(self.error, "excerpt", None)


NormalizeResult = Union[ValidRecordList, ParseFailure]


def strip_code_fence(text: str) -> str:
    """Return the trimmed text, unwrapped if a fence encloses all of it."""
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    if match and match.group(1):
        return match.group(1).strip()
    return stripped


def repair_stray_tokens(text: str, max_passes: int = MAX_REPAIR_PASSES) -> str:
    """Remove non-ASCII runs wedged between a JSON value and `,` `}` `]`.

    Substitution is repeated until a pass leaves the text unchanged or
    `max_passes` passes have run.
    """
    for _ in range(max_passes):
        cleaned = _STRAY_TOKEN_RE.sub(r"\1", text)
        if cleaned == text:
            return cleaned
        text = cleaned
    if max_passes > 0:
        logger.warning("Stray-token cleanup stopped after %d passes", max_passes)
    return text


def _is_text(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _student_count(value: object) -> Optional[int]:
    """Coerce a JSON number to a non-negative int, or return None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float) and math.isfinite(value) and value.is_integer() and value >= 0:
        return int(value)
    return None


def _optional_text(value: object) -> Optional[str]:
    if isinstance(value, str):
        return value if value.strip() else None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _required_seen(item: object) -> Dict[str, object]:
    if not isinstance(item, dict):
        return {"item": item}
    return {key: item.get(key) for _, key, _ in REQUIRED_FIELDS}


def _map_entry(item: object, index: int) -> Tuple[SchoolRecord, List[str]]:
    """Map one array element to a record.

    Returns the record and the JSON keys that had to be filled with a
    placeholder.  Any non-empty list means the entry is invalid.
    """
    data: Dict[str, object] = item if isinstance(item, dict) else {}
    placeholders: List[str] = []

    name = data.get("name")
    if not _is_text(name):
        name = f"Unnamed School {index + 1}"
        placeholders.append("name")
    address = data.get("address")
    if not _is_text(address):
        address = ADDRESS_PLACEHOLDER
        placeholders.append("address")
    school_type = data.get("type")
    if not _is_text(school_type):
        school_type = TYPE_PLACEHOLDER
        placeholders.append("type")
    count = _student_count(data.get("studentCount"))
    if count is None:
        count = 0
        placeholders.append("studentCount")

    optional = {attr: _optional_text(data.get(key)) for attr, key, _ in OPTIONAL_FIELDS}
    record = SchoolRecord(
        name=name,  # type: ignore[arg-type]
        address=address,  # type: ignore[arg-type]
        type=school_type,  # type: ignore[arg-type]
        student_count=count,
        **optional,
    )
    return record, placeholders


def normalize(raw_text: Optional[str], strict: bool = False) -> List[SchoolRecord]:
    """Turn a raw model reply into validated school records.

    Args:
        raw_text: Text returned by the generative model.
        strict: Fail on the first invalid entry instead of dropping it.

    Returns:
        The valid records in reply order.  An empty list is a legal
        result when the reply held no valid entries.

    Raises:
        EmptyResponse: The reply is empty or whitespace.
        MalformedJson: The cleaned reply is not valid JSON.
        UnexpectedShape: The JSON value is not an array.
        InvalidEntry: Strict mode only; an entry failed validation.
    """
    if raw_text is None or not raw_text.strip():
        raise EmptyResponse()

    text = repair_stray_tokens(strip_code_fence(raw_text))
    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError) as exc:
        # ValueError covers JSONDecodeError and over-long integer literals;
        # RecursionError comes from very deeply nested arrays or objects.
        logger.error("Failed to parse JSON response: %s", exc)
        logger.debug("String attempted to parse: %s", text)
        raise MalformedJson(text[:EXCERPT_LENGTH], detail=getattr(exc, "msg", str(exc))) from exc

    if not isinstance(parsed, list):
        logger.error("Parsed data is not an array: %s", type(parsed).__name__)
        raise UnexpectedShape(_json_type_name(parsed))

    records: List[SchoolRecord] = []
    for index, item in enumerate(parsed):
        record, placeholders = _map_entry(item, index)
        if placeholders:
            if strict:
                raise InvalidEntry(index, _required_seen(item))
            logger.warning(
                "Dropping school at index %d; invalid %s: %s",
                index,
                ", ".join(placeholders),
                _required_seen(item),
            )
            continue
        records.append(record)
    logger.debug("Normalized %d of %d entries", len(records), len(parsed))
    return records


def parse_schools(raw_text: Optional[str], strict: bool = False) -> NormalizeResult:
    """Non-raising form of :func:`normalize`."""
    try:
        return ValidRecordList(normalize(raw_text, strict=strict))
    except SchoolDataError as exc:
        return ParseFailure(exc)


def _json_type_name(value: object) -> str:
    if isinstance(value, dict):
        return "object"
    if isinstance(value, str):
        return "string"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if value is None:
        return "null"
    return type(value).__name__
