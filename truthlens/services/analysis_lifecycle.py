"""
analysis_lifecycle.py — One analyze click, start to finish.

Flow (strictly sequential, no parallel steps):

  IDLE → VALIDATING → ENCODING → AWAITING_INFERENCE → VALIDATING_RESULT → SUCCEEDED
                 ↘            ↘                    ↘
                  FAILED       FAILED               FAILED

  VALIDATING         — a file must be attached and be image/* or video/*;
                       otherwise FAILED with no encoder or Gemini call.
  ENCODING           — media_encoder.encode(); read errors → FAILED.
  AWAITING_INFERENCE — GeminiClient.infer(); ServiceError → FAILED.
  VALIDATING_RESULT  — result_validator.validate() never fails, so → SUCCEEDED.

A lifecycle holds a single result/error slot, like the UI it backs. Every
analyze() call takes a new generation token; when an older call finishes
after a newer one has started, its outcome is returned to that caller but
never written to the slot. The older network call is not cancelled.

The encoder, client and validator are injectable so tests can count calls.
"""

import inspect
import logging
from dataclasses import dataclass, replace
from enum import Enum

from truthlens.ai.gemini_client import GeminiClient, get_gemini_client
from truthlens.ai.media_encoder import encode, is_supported_mime, media_mime_type
from truthlens.ai.prompts import PROMPT_CONTRACT, PromptContract
from truthlens.ai.result_validator import validate
from truthlens.core.errors import AnalysisError, PreconditionError, UnsupportedMediaError
from truthlens.models.analysis import AnalysisRequest, AnalysisResult

logger = logging.getLogger(__name__)


class LifecycleState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    ENCODING = "encoding"
    AWAITING_INFERENCE = "awaiting_inference"
    VALIDATING_RESULT = "validating_result"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class AnalysisOutcome:
    """Terminal state of one cycle: exactly one of result / error is set."""

    token: int
    state: LifecycleState
    result: AnalysisResult | None = None
    error: str | None = None
    exception: AnalysisError | None = None
    stale: bool = False

    @property
    def succeeded(self) -> bool:
        return self.state is LifecycleState.SUCCEEDED


async def _release(media_file) -> None:
    close = getattr(media_file, "close", None)
    if callable(close):
        closed = close()
        if inspect.isawaitable(closed):
            await closed


class RequestLifecycle:
    def __init__(
        self,
        client: GeminiClient | None = None,
        contract: PromptContract = PROMPT_CONTRACT,
        encoder=encode,
        validator=validate,
        max_bytes: int | None = None,
    ) -> None:
        self._client = client if client is not None else get_gemini_client()
        self._contract = contract
        self._encoder = encoder
        self._validator = validator
        self._max_bytes = max_bytes
        self._token = 0

        self.state = LifecycleState.IDLE
        self.attachment = None
        self.result: AnalysisResult | None = None
        self.error: str | None = None

    @property
    def current_token(self) -> int:
        return self._token

    # ── Attachment slot ───────────────────────────────────────────────────────

    async def attach(self, media_file) -> str | None:
        """
        Replace the attached file, releasing the previous one.

        Returns the user-facing error when the file is not image/video;
        the previous attachment is kept in that case.
        """
        mime_type = media_mime_type(media_file)
        if not is_supported_mime(mime_type):
            logger.info("Rejected attachment with unsupported MIME type %s", mime_type)
            self.error = UnsupportedMediaError.user_message
            return self.error

        previous, self.attachment = self.attachment, media_file
        self.error = None
        if previous is not None and previous is not media_file:
            await _release(previous)
        return None

    async def release(self) -> None:
        """Drop and close the current attachment."""
        previous, self.attachment = self.attachment, None
        if previous is not None:
            await _release(previous)

    # ── Cycle ─────────────────────────────────────────────────────────────────

    def reset(self) -> None:
        self.state = LifecycleState.IDLE
        self.result = None
        self.error = None

    def _enter(self, token: int, state: LifecycleState) -> None:
        if token == self._token:
            self.state = state
        logger.debug("Analysis %d → %s", token, state.value)

    def _finish(self, outcome: AnalysisOutcome) -> AnalysisOutcome:
        if outcome.token != self._token:
            logger.info(
                "Discarding stale analysis %d (latest is %d)", outcome.token, self._token
            )
            return replace(outcome, stale=True)
        self.state = outcome.state
        self.result = outcome.result
        self.error = outcome.error
        return outcome

    async def analyze(self, context_text: str = "", media_file=None) -> AnalysisOutcome:
        """
        Run one full cycle over `media_file` (or the attached file).

        Never raises for AnalysisError; the failure is carried in the outcome.
        """
        self._token += 1
        token = self._token
        self.reset()
        self._enter(token, LifecycleState.VALIDATING)

        media_file = media_file if media_file is not None else self.attachment
        try:
            if media_file is None:
                raise PreconditionError("No media attached")
            mime_type = media_mime_type(media_file)
            if not is_supported_mime(mime_type):
                raise UnsupportedMediaError(f"Unsupported MIME type {mime_type}")

            self._enter(token, LifecycleState.ENCODING)
            request = AnalysisRequest(
                media=await self._encoder(media_file, max_bytes=self._max_bytes),
                context_text=context_text,
            )

            self._enter(token, LifecycleState.AWAITING_INFERENCE)
            raw_text = await self._client.infer(
                request.media,
                self._contract.system_instruction,
                self._contract.build_user_message(request.context_text),
                self._contract.response_schema(),
            )
        except PreconditionError as exc:
            logger.info("Analysis %d rejected: %s", token, exc)
            return self._finish(AnalysisOutcome(
                token, LifecycleState.FAILED, error=exc.user_message, exception=exc,
            ))
        except AnalysisError as exc:
            logger.error("Analysis %d failed: %s", token, exc)
            return self._finish(AnalysisOutcome(
                token, LifecycleState.FAILED, error=exc.user_message, exception=exc,
            ))

        self._enter(token, LifecycleState.VALIDATING_RESULT)
        result = self._validator(raw_text)
        logger.info(
            "Analysis %d complete: verdict=%s confidence=%s",
            token, result.verdict.value, result.confidence.value,
        )
        return self._finish(AnalysisOutcome(token, LifecycleState.SUCCEEDED, result=result))
