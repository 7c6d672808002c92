"""
Health check endpoint.

Used by container health checks, load balancers, and the host UI to check
API connectivity. Reports which inference mode the process runs in so a
deployment accidentally left in mock mode is easy to spot.
"""

import logging

from fastapi import APIRouter
from pydantic import BaseModel

from truthlens.ai.gemini_client import get_gemini_client

logger = logging.getLogger(__name__)
router = APIRouter()

API_VERSION = "0.1.0"


class HealthResponse(BaseModel):
    status: str  # Always "ok" if the API process is alive
    version: str
    environment: str
    ai_mode: str  # "mock" | "live"


@router.get("", response_model=HealthResponse, summary="API health check")
async def health_check() -> HealthResponse:
    from truthlens.core.config import settings

    ai_mode = "mock" if get_gemini_client().mock_mode else "live"
    if ai_mode == "mock" and settings.environment == "production":
        logger.warning("Health check: production is serving canned mock analyses (AI_MOCK_MODE=true)")

    return HealthResponse(
        status="ok",
        version=API_VERSION,
        environment=settings.environment,
        ai_mode=ai_mode,
    )
