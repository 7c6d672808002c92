"""
media_encoder.py — Turn an uploaded file into a MediaPayload for Gemini.

Accepts anything that looks like an upload: an object with a MIME type
(`content_type` like Starlette's UploadFile, or `mime_type`) and an awaitable
`read()`. LocalMediaFile adapts a path on disk to the same shape.

The MIME check (image/* or video/* only) belongs to the caller —
analysis_lifecycle rejects other types before encode() is ever reached.
"""

import asyncio
import base64
import logging
import re
from pathlib import Path

from truthlens.core.errors import MediaReadError, MediaTooLargeError
from truthlens.models.analysis import MediaPayload

logger = logging.getLogger(__name__)

_SUPPORTED_PREFIXES = ("image/", "video/")

_MIME_MAP = {
    ".jpg":  "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png":  "image/png",
    ".webp": "image/webp",
    ".gif":  "image/gif",
    ".heic": "image/heic",
    ".mp4":  "video/mp4",
    ".webm": "video/webm",
    ".mov":  "video/quicktime",
    ".avi":  "video/x-msvideo",
    ".mkv":  "video/x-matroska",
}

_DATA_URI_PREFIX = re.compile(r"^data:[^,]*?;base64,", re.IGNORECASE)


def is_supported_mime(mime_type: str | None) -> bool:
    return bool(mime_type) and mime_type.lower().startswith(_SUPPORTED_PREFIXES)


def mime_from_filename(filename: str) -> str:
    """Derive a MIME type from a filename extension."""
    ext = "." + filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return _MIME_MAP.get(ext, "application/octet-stream")


def strip_data_uri_prefix(text: str) -> str:
    """'data:image/png;base64,iVBOR...' → 'iVBOR...'. Plain base64 passes through."""
    return _DATA_URI_PREFIX.sub("", text.strip(), count=1)


def media_mime_type(file) -> str:
    """Declared MIME type of an upload, falling back to its filename extension."""
    mime = getattr(file, "content_type", None) or getattr(file, "mime_type", None)
    if mime:
        return mime
    filename = getattr(file, "filename", None)
    return mime_from_filename(filename) if filename else "application/octet-stream"


class LocalMediaFile:
    """A file on disk, exposed with the same read()/mime_type shape as an upload."""

    def __init__(self, path: str | Path, mime_type: str | None = None) -> None:
        self.path = Path(path)
        self.filename = self.path.name
        self.mime_type = mime_type or mime_from_filename(self.path.name)

    def _read_sync(self, size: int) -> bytes:
        with self.path.open("rb") as fh:
            return fh.read(size)

    async def read(self, size: int = -1) -> bytes:
        # Disk IO off the event loop
        return await asyncio.to_thread(self._read_sync, size)


async def encode(file, max_bytes: int | None = None) -> MediaPayload:
    """
    Read the file into memory and base64-encode it.

    With max_bytes set, at most max_bytes + 1 bytes are read, so an oversized
    upload is rejected without being buffered in full.

    Raises:
        MediaReadError:     the read failed or produced no bytes.
        MediaTooLargeError: the file is larger than max_bytes.
    """
    mime_type = media_mime_type(file)
    try:
        raw = await file.read() if max_bytes is None else await file.read(max_bytes + 1)
    except (OSError, ValueError) as exc:
        logger.error("Media read failed (mime=%s): %s", mime_type, exc)
        raise MediaReadError(f"Could not read media: {exc}") from exc

    if isinstance(raw, str):
        # Some hosts hand over the FileReader data: URL instead of bytes
        encoded = strip_data_uri_prefix(raw)
        size = len(encoded) * 3 // 4
    else:
        encoded = None
        size = len(raw)

    if max_bytes is not None and size > max_bytes:
        raise MediaTooLargeError(f"Media is over the {max_bytes} byte limit")
    if encoded is None:
        encoded = base64.b64encode(raw).decode("ascii")
    if not encoded:
        raise MediaReadError("Media file is empty")

    logger.debug("Encoded media (mime=%s, bytes=%d, b64 chars=%d)", mime_type, size, len(encoded))
    return MediaPayload(mime_type=mime_type, encoded_data=encoded)
