"""
analysis.py — Media authenticity endpoint.

Routes:
  POST /api/v1/analyze — multipart form: `file` (image/* or video/*) + optional `context`

HOW THE DATA FLOWS
──────────────────
1. The host UI uploads the file as multipart form data, plus any free-text
   context the user typed.
2. A fresh RequestLifecycle runs the cycle: validate → encode → Gemini → validate result.
3. Success returns the five-field AnalysisResult. A malformed Gemini reply is
   still a success — it comes back as the "Uncertain" sentinel result.
4. Failures come back as HTTP errors whose `detail` is the user-facing message:

     no file                 400
     not image/video         415
     over max_upload_mb      413
     unreadable upload       400
     Gemini failure / empty  502

No authentication required. Rate limited per client IP.
"""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status

from truthlens.ai.gemini_client import GeminiClient, get_gemini_client
from truthlens.core.config import settings
from truthlens.core.errors import (
    MediaReadError,
    MediaTooLargeError,
    PreconditionError,
    ServiceError,
    UnsupportedMediaError,
)
from truthlens.core.rate_limit import limiter
from truthlens.models.analysis import AnalysisResult, ErrorResponse
from truthlens.services.analysis_lifecycle import RequestLifecycle

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["analysis"])

# Most specific first
_STATUS_BY_ERROR = (
    (UnsupportedMediaError, status.HTTP_415_UNSUPPORTED_MEDIA_TYPE),
    (MediaTooLargeError, status.HTTP_413_REQUEST_ENTITY_TOO_LARGE),
    (PreconditionError, status.HTTP_400_BAD_REQUEST),
    (MediaReadError, status.HTTP_400_BAD_REQUEST),
    (ServiceError, status.HTTP_502_BAD_GATEWAY),
)


def _status_for(exc: Exception | None) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@router.post(
    "/analyze",
    response_model=AnalysisResult,
    status_code=200,
    responses={code: {"model": ErrorResponse} for code in (400, 413, 415, 502)},
)
@limiter.limit(settings.analyze_rate_limit)
async def analyze_media(
    request: Request,
    file: UploadFile | None = File(default=None),
    context: str = Form(default=""),
    client: GeminiClient = Depends(get_gemini_client),
):
    """
    Judge whether an uploaded image or video is real, AI-generated, or manipulated.

    Gemini makes the call; this endpoint only shapes the request and
    validates the response.
    """
    lifecycle = RequestLifecycle(client=client, max_bytes=settings.max_upload_bytes)
    outcome = await lifecycle.analyze(context, media_file=file)

    if not outcome.succeeded:
        raise HTTPException(status_code=_status_for(outcome.exception), detail=outcome.error)
    return outcome.result
