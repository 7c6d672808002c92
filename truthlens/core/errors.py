"""
errors.py — Failure taxonomy for one analysis cycle.

Each class carries a fixed `user_message` — the text the host UI shows in its
error banner. Internal details stay in the exception args and the logs.

  PreconditionError  — nothing (or the wrong thing) attached; never reaches Gemini
  MediaReadError     — the upload could not be read into memory
  ServiceError       — Gemini call failed or came back empty
  DataQualityError   — Gemini answered with unparseable output; absorbed by
                       result_validator and never raised past it
  ConfigurationError — process cannot talk to Gemini at all (missing key)
"""

GENERIC_FAILURE_MESSAGE = "An error occurred during analysis. Please try again."


class AnalysisError(Exception):
    """Base class for failures that end an analysis cycle."""

    user_message = GENERIC_FAILURE_MESSAGE


class PreconditionError(AnalysisError):
    user_message = "This tool only analyzes visual media. Please upload an image or video."


class UnsupportedMediaError(PreconditionError):
    user_message = "Please upload a valid image or video file."


class MediaTooLargeError(PreconditionError):
    user_message = "The uploaded file is too large to analyze."


class MediaReadError(AnalysisError, IOError):
    pass


class ServiceError(AnalysisError):
    pass


class DataQualityError(AnalysisError):
    pass


class ConfigurationError(RuntimeError):
    pass
