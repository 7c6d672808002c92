"""
result_validator.py — Raw Gemini text → AnalysisResult, never raising.

A malformed reply is a data-quality problem, not a system fault: unparseable
text becomes SENTINEL_RESULT (an "Uncertain" verdict that explains itself),
and a parseable object with missing or blank keys gets per-field defaults.
Keys are read exactly as declared in the output schema (case-sensitive).
"""

import json
import logging

from truthlens.core.errors import DataQualityError
from truthlens.models.analysis import AnalysisResult, Confidence, Verdict

logger = logging.getLogger(__name__)

SENTINEL_RESULT = AnalysisResult(
    description="N/A",
    verdict=Verdict.UNCERTAIN,
    confidence=Confidence.UNKNOWN,
    reasoning="Failed to parse the analysis from the AI. The JSON was malformed.",
    reflection="N/A",
)

FIELD_DEFAULTS: dict[str, str] = {
    "Description": "No description provided.",
    "Verdict": Verdict.UNCERTAIN.value,
    "Confidence": Confidence.UNKNOWN.value,
    "Reasoning": "No reasoning provided.",
    "Reflection": "No reflection provided.",
}


def _parse_document(raw_text: str) -> dict:
    try:
        data = json.loads(raw_text.strip())
    except (json.JSONDecodeError, ValueError) as exc:
        raise DataQualityError(f"Response is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise DataQualityError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _present(data: dict, key: str) -> bool:
    value = data.get(key)
    return isinstance(value, str) and bool(value.strip())


def _field(data: dict, key: str) -> str:
    return data[key] if _present(data, key) else FIELD_DEFAULTS[key]


def validate(raw_text: str | None) -> AnalysisResult:
    """Parse and normalise one Gemini response. Every input yields a result."""
    try:
        data = _parse_document(raw_text or "")
    except DataQualityError as exc:
        logger.warning("Malformed analysis from Gemini (%s). Raw: %.200r", exc, raw_text)
        return SENTINEL_RESULT

    missing = [key for key in FIELD_DEFAULTS if not _present(data, key)]
    if missing:
        logger.info("Gemini response missing fields %s — defaults applied", missing)

    return AnalysisResult(
        description=_field(data, "Description"),
        verdict=Verdict.from_label(_field(data, "Verdict")),
        confidence=Confidence.from_label(_field(data, "Confidence")),
        reasoning=_field(data, "Reasoning"),
        reflection=_field(data, "Reflection"),
    )
