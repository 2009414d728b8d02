"""
Normalization of the `ai_analysis` column.

The upstream pipeline stores the analysis either as plain JSON text or as
JSON wrapped in a markdown fence (```json ... ```). Only the fenced form is
parsed; everything else is handed back exactly as stored.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Union

logger = logging.getLogger(__name__)

FENCE_MARKER = "```json"
_LEADING_FENCE = re.compile(r"^```json\s*")
_TRAILING_FENCE = re.compile(r"\s*```\s*\Z")


@dataclass(frozen=True)
class RawText:
    """Value passed through untouched (unfenced text, None, or non-string)."""

    value: Any


@dataclass(frozen=True)
class Parsed:
    document: Any


@dataclass(frozen=True)
class Unparseable:
    text: str
    error: str


AnalysisResult = Union[RawText, Parsed, Unparseable]


def _reject_constant(name: str):
    # NaN/Infinity are not valid JSON and cannot be rendered back out
    raise ValueError(f"Invalid JSON constant: {name}")


def strip_fence(text: str) -> str:
    body = _LEADING_FENCE.sub("", text, count=1)
    return _TRAILING_FENCE.sub("", body, count=1)


def normalize_analysis(value: Any) -> AnalysisResult:
    if not isinstance(value, str) or not value.startswith(FENCE_MARKER):
        return RawText(value)

    try:
        document = json.loads(strip_fence(value), parse_constant=_reject_constant)
    except ValueError as exc:
        return Unparseable(text=value, error=str(exc))

    return Parsed(document)


def response_value(result: AnalysisResult) -> Any:
    if isinstance(result, Parsed):
        return result.document
    if isinstance(result, Unparseable):
        return result.text
    return result.value


def normalize_record(record: dict, field: str = "ai_analysis") -> dict:
    """
    Return a copy of `record` with its analysis field normalized.

    The input mapping is never modified. Unparseable analysis is logged and
    kept as the original text.
    """
    out = dict(record)
    if field not in out:
        return out

    result = normalize_analysis(out[field])
    if isinstance(result, Unparseable):
        logger.warning(
            "Error parsing AI analysis for record id=%s: %s",
            out.get("id"),
            result.error,
        )
    out[field] = response_value(result)
    return out
