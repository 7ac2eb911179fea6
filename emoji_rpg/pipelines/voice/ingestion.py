"""Request ingestion helpers for encoded audio payloads."""

from __future__ import annotations

import base64
import binascii
import re
from typing import Final

from .types import RequestValidationError

DEFAULT_AUDIO_FORMAT: Final[str] = "webm"

_DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[^,]*)?,", re.IGNORECASE)


def split_data_url(payload: str) -> tuple[str | None, str]:
    """Return ``(mime_type, base64_body)`` for a plain or data-URL payload."""

    match = _DATA_URL_PATTERN.match(payload)
    if match is None:
        return None, payload
    mime = match.group("mime")
    return (mime.lower() if mime else None), payload[match.end():]


def detect_audio_format(payload: str, hint: str | None = None) -> str:
    """Resolve the audio format from an explicit hint or the data-URL prefix."""

    if hint and hint.strip():
        return hint.strip().lower()

    mime, _ = split_data_url(payload)
    if mime and mime.startswith("audio/"):
        return mime.split("/", 1)[1]
    return DEFAULT_AUDIO_FORMAT


def decoded_length(body: str) -> int:
    """Exact decoded size of a well-formed base64 body, without decoding it."""

    padding = len(body) - len(body.rstrip("="))
    return (len(body) * 3) // 4 - padding


def decode_audio_payload(payload: str, max_bytes: int) -> bytes:
    """Decode base64 audio, rejecting oversized or malformed payloads."""

    _, body = split_data_url(payload.strip())
    body = "".join(body.split())
    # Browsers and some encoders drop the trailing "=" padding.
    body += "=" * (-len(body) % 4)

    size = decoded_length(body)
    if size > max_bytes:
        raise RequestValidationError(
            "Audio payload too large",
            f"Decoded audio is {size} bytes; the limit is {max_bytes} bytes.",
        )

    try:
        audio_bytes = base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise RequestValidationError(
            "Invalid audio payload",
            "audioData must be base64, optionally with a data URL prefix.",
        ) from exc

    if len(audio_bytes) > max_bytes:
        raise RequestValidationError(
            "Audio payload too large",
            f"Decoded audio is {len(audio_bytes)} bytes; the limit is {max_bytes} bytes.",
        )
    return audio_bytes


__all__ = [
    "DEFAULT_AUDIO_FORMAT",
    "decode_audio_payload",
    "decoded_length",
    "detect_audio_format",
    "split_data_url",
]
