"""
analysis.py — Pydantic models for media authenticity analysis.

  MediaPayload    — base64 media + MIME type, ready to send inline to Gemini
  AnalysisRequest — one submission: media (mandatory at dispatch) + optional context
  AnalysisResult  — the five-field verdict, immutable once built by result_validator

Verdict and Confidence are closed enums. Gemini is free to answer with any
label, so `from_label()` folds case/whitespace variants onto a member and
falls back to UNCERTAIN / UNKNOWN for anything else.
"""

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


def _fold(label: str) -> str:
    return " ".join(label.split()).casefold()


class Verdict(str, Enum):
    LIKELY_REAL = "Likely Real"
    POSSIBLY_AI_GENERATED = "Possibly AI-Generated"
    CLEARLY_AI_GENERATED = "Clearly AI-Generated"
    MANIPULATED = "Manipulated"
    UNCERTAIN = "Uncertain"

    @classmethod
    def from_label(cls, label: str) -> "Verdict":
        for member in cls:
            if _fold(member.value) == _fold(label):
                return member
        logger.warning("Unrecognised verdict label %r — treating as %s", label, cls.UNCERTAIN.value)
        return cls.UNCERTAIN


class Confidence(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    UNKNOWN = "Unknown"

    @classmethod
    def from_label(cls, label: str) -> "Confidence":
        for member in cls:
            if _fold(member.value) == _fold(label):
                return member
        logger.warning("Unrecognised confidence label %r — treating as %s", label, cls.UNKNOWN.value)
        return cls.UNKNOWN


class MediaPayload(BaseModel):
    """Transport-safe media: base64 text with any data: URI prefix removed."""

    model_config = ConfigDict(frozen=True)

    mime_type: str = Field(..., min_length=1)
    encoded_data: str = Field(..., min_length=1)


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    media: MediaPayload | None = None
    context_text: str = ""


class AnalysisResult(BaseModel):
    """Final verdict returned to the host UI."""

    model_config = ConfigDict(frozen=True)

    description: str
    verdict: Verdict
    confidence: Confidence
    reasoning: str
    reflection: str


class ErrorResponse(BaseModel):
    detail: str
