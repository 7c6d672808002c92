"""
test_media_encoder.py — Upload → MediaPayload encoding.
"""

import base64

import pytest

from truthlens.ai.media_encoder import (
    LocalMediaFile,
    encode,
    is_supported_mime,
    media_mime_type,
    mime_from_filename,
    strip_data_uri_prefix,
)
from truthlens.core.errors import MediaReadError, MediaTooLargeError


class TestEncode:
    async def test_bytes_are_base64_encoded(self, make_media):
        payload = await encode(make_media(data=b"hello-image", content_type="image/jpeg"))
        assert payload.mime_type == "image/jpeg"
        assert base64.b64decode(payload.encoded_data) == b"hello-image"

    async def test_video_mime_is_preserved(self, make_media):
        payload = await encode(make_media(content_type="video/mp4", filename="clip.mp4"))
        assert payload.mime_type == "video/mp4"

    async def test_data_uri_text_is_stripped(self, make_media):
        b64 = base64.b64encode(b"pixels").decode()
        payload = await encode(make_media(data=f"data:image/png;base64,{b64}"))
        assert payload.encoded_data == b64

    async def test_read_failure_raises_media_read_error(self, make_media):
        media = make_media(read_error=FileNotFoundError("removed mid-read"))
        with pytest.raises(MediaReadError) as exc_info:
            await encode(media)
        assert isinstance(exc_info.value, IOError)

    async def test_empty_file_raises_media_read_error(self, make_media):
        with pytest.raises(MediaReadError):
            await encode(make_media(data=b""))

    async def test_over_limit_raises_too_large(self, make_media):
        with pytest.raises(MediaTooLargeError):
            await encode(make_media(data=b"0123456789"), max_bytes=4)

    async def test_at_limit_is_accepted(self, make_media):
        payload = await encode(make_media(data=b"0123"), max_bytes=4)
        assert base64.b64decode(payload.encoded_data) == b"0123"

    async def test_limit_bounds_the_read(self, make_media):
        media = make_media(data=b"x" * 10_000)
        with pytest.raises(MediaTooLargeError):
            await encode(media, max_bytes=10)
        assert media.read_sizes == [11]

    async def test_no_limit_reads_everything(self, make_media):
        media = make_media(data=b"x" * 10_000)
        payload = await encode(media)
        assert media.read_sizes == [-1]
        assert len(base64.b64decode(payload.encoded_data)) == 10_000


class TestLocalMediaFile:
    async def test_reads_file_from_disk(self, tmp_path):
        path = tmp_path / "frame.webp"
        path.write_bytes(b"webp-bytes")

        payload = await encode(LocalMediaFile(path))

        assert payload.mime_type == "image/webp"
        assert base64.b64decode(payload.encoded_data) == b"webp-bytes"

    async def test_explicit_mime_overrides_extension(self, tmp_path):
        path = tmp_path / "upload.bin"
        path.write_bytes(b"x")
        assert LocalMediaFile(path, mime_type="video/webm").mime_type == "video/webm"

    async def test_oversized_file_is_read_only_past_limit(self, tmp_path):
        path = tmp_path / "big.mp4"
        path.write_bytes(b"\x00" * 4096)
        media = LocalMediaFile(path)

        assert len(await media.read(65)) == 65
        with pytest.raises(MediaTooLargeError):
            await encode(media, max_bytes=64)

    async def test_missing_file_raises_media_read_error(self, tmp_path):
        with pytest.raises(MediaReadError):
            await encode(LocalMediaFile(tmp_path / "gone.png"))


class TestMimeHelpers:
    @pytest.mark.parametrize("mime", ["image/png", "image/jpeg", "video/mp4", "VIDEO/WEBM"])
    def test_supported(self, mime):
        assert is_supported_mime(mime) is True

    @pytest.mark.parametrize("mime", ["application/pdf", "text/plain", "audio/mpeg", "", None])
    def test_unsupported(self, mime):
        assert is_supported_mime(mime) is False

    def test_mime_from_filename(self):
        assert mime_from_filename("Holiday.JPG") == "image/jpeg"
        assert mime_from_filename("clip.mov") == "video/quicktime"
        assert mime_from_filename("notes") == "application/octet-stream"

    def test_media_mime_type_falls_back_to_filename(self, make_media):
        media = make_media(content_type=None, filename="clip.mp4")
        assert media_mime_type(media) == "video/mp4"

    def test_strip_plain_base64_is_untouched(self):
        assert strip_data_uri_prefix("  aGVsbG8=\n") == "aGVsbG8="
