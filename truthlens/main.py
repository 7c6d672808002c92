"""
TruthLens API — Application entry point.

Bootstraps FastAPI, wires up middleware, registers route groups, and builds
the Gemini client at startup so a missing GEMINI_API_KEY (outside mock mode)
stops the process before it serves anything.

Run locally:
    uvicorn truthlens.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from truthlens.ai.gemini_client import get_gemini_client
from truthlens.core.config import settings
from truthlens.core.rate_limit import limiter
from truthlens.routes.analysis import router as analysis_router
from truthlens.routes.health import API_VERSION
from truthlens.routes.health import router as health_router

# ─── Logging ───────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ─── Lifespan ──────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Code before `yield` runs on startup; code after runs on shutdown."""
    logger.info("Starting TruthLens API (env: %s)", settings.environment)
    get_gemini_client()  # raises ConfigurationError when the key is missing
    yield
    logger.info("Shutting down TruthLens API")


# ─── App ───────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="TruthLens API",
    description=(
        "Authenticity verdicts for images and video, delegated to Gemini. "
        "All AI results are probabilistic — not guaranteed."
    ),
    version=API_VERSION,
    lifespan=lifespan,
    # Disable docs in production to reduce attack surface
    docs_url="/docs" if settings.environment != "production" else None,
    redoc_url="/redoc" if settings.environment != "production" else None,
)

# ─── Rate limiting ─────────────────────────────────────────────────────────────
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ─── Middleware ─────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ─── Routes ────────────────────────────────────────────────────────────────────
app.include_router(health_router, prefix="/health", tags=["health"])
app.include_router(analysis_router)


@app.get("/", tags=["root"])
async def root():
    """API root — basic metadata."""
    return {
        "name": "TruthLens API",
        "version": API_VERSION,
        "status": "running",
        "environment": settings.environment,
        "docs": "/docs",
    }
