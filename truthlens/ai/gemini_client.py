"""
GeminiClient — Async wrapper around the Google Generative AI SDK.

One call per analysis: the media goes inline, the fixed system instruction
goes in as `system_instruction`, and the five-key schema is passed as
`response_schema` so Gemini is constrained to answer with JSON. The schema is
a request to the model, not something enforced here — result_validator deals
with whatever text comes back.

Supports two runtime modes (set via AI_MOCK_MODE env var):
  - MOCK mode (default): returns a deterministic canned analysis.
    Use for tests and local dev without API keys.
  - REAL mode: makes actual Gemini API calls.
    Requires GEMINI_API_KEY; without it the client refuses to initialise.
"""

import base64
import logging
import os
from functools import lru_cache

# Python 3.14 + protobuf native extension can fail when importing Gemini deps.
# Keep this as default-only so users can still override it explicitly.
os.environ.setdefault("PROTOCOL_BUFFERS_PYTHON_IMPLEMENTATION", "python")

import google.generativeai as genai

from truthlens.core.config import settings
from truthlens.core.errors import ConfigurationError, ServiceError
from truthlens.models.analysis import MediaPayload

logger = logging.getLogger(__name__)


# Canned analysis returned by every infer() call in mock mode.
_MOCK_RESPONSE = (
    '{"Description": "[MOCK] Placeholder description of the uploaded media.", '
    '"Verdict": "Possibly AI-Generated", '
    '"Confidence": "Low", '
    '"Reasoning": "[MOCK] No real analysis performed — mock mode active.", '
    '"Reflection": "Set AI_MOCK_MODE=false and provide GEMINI_API_KEY for real analysis."}'
)


class GeminiClient:
    """
    Inference boundary for TruthLens.

    Constructor arguments override settings; tests use them to build a
    real-mode client without touching the environment.
    """

    def __init__(
        self,
        mock_mode: bool | None = None,
        api_key: str | None = None,
        model_name: str | None = None,
    ) -> None:
        self.mock_mode = settings.ai_mock_mode if mock_mode is None else mock_mode
        self.model_name = model_name or settings.gemini_model
        key = settings.gemini_api_key if api_key is None else api_key

        if not self.mock_mode:
            if not key:
                raise ConfigurationError(
                    "GEMINI_API_KEY is not set. Provide a key or set AI_MOCK_MODE=true."
                )
            genai.configure(api_key=key)
            self._genai = genai

        if self.mock_mode:
            logger.info("GeminiClient initialised in MOCK mode")
        else:
            logger.info("GeminiClient initialised in REAL mode (model: %s)", self.model_name)

    async def infer(
        self,
        media: MediaPayload,
        system_instruction: str,
        user_message: str,
        output_schema: dict,
    ) -> str:
        """
        Send media + prompt to Gemini and return the raw response text.

        Args:
            media:              Inline media (MIME type + base64 data).
            system_instruction: Fixed behavioural contract.
            user_message:       Per-request user turn.
            output_schema:      Structural schema for `response_schema`.

        Returns:
            Raw text, expected but not guaranteed to be JSON matching output_schema.

        Raises:
            ServiceError: the call failed or the response body was empty.
        """
        if media is None:
            raise ValueError("media is required")
        if not system_instruction or not user_message:
            raise ValueError("system_instruction and user_message must be non-empty")

        if self.mock_mode:
            return _MOCK_RESPONSE

        logger.info(
            "Gemini inference (model=%s, mime=%s, size=%d chars)",
            self.model_name, media.mime_type, len(media.encoded_data),
        )
        try:
            model = self._genai.GenerativeModel(self.model_name, system_instruction=system_instruction)
            contents = [
                {"inline_data": {"mime_type": media.mime_type, "data": base64.b64decode(media.encoded_data)}},
                {"text": user_message},
            ]
            response = await model.generate_content_async(
                contents,
                generation_config={
                    "response_mime_type": "application/json",
                    "response_schema": output_schema,
                },
            )
            text = response.text
        except Exception as exc:
            logger.error("Gemini API error (model=%s, mime=%s): %s", self.model_name, media.mime_type, exc)
            raise ServiceError(f"Gemini call failed: {exc}") from exc

        if not text:
            logger.error("Gemini returned an empty response (model=%s)", self.model_name)
            raise ServiceError("Received an empty response from Gemini.")
        return text


@lru_cache
def get_gemini_client() -> GeminiClient:
    """Process-wide client, built on first use (the app builds it at startup)."""
    return GeminiClient()
