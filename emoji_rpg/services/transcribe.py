"""Amazon Transcribe integration helpers using the Streaming API."""

from __future__ import annotations

import asyncio
import logging
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from amazon_transcribe.auth import StaticCredentialResolver
from amazon_transcribe.client import TranscribeStreamingClient
from amazon_transcribe.handlers import TranscriptResultStreamHandler
from amazon_transcribe.model import TranscriptEvent
from fastapi.concurrency import run_in_threadpool

from emoji_rpg.config.settings import AwsConfig, TranscribeConfig

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 8192
_FFMPEG_TIMEOUT_SECONDS = 30
_FORMAT_SUFFIXES = {
    "webm": ".webm",
    "mp3": ".mp3",
    "mpeg": ".mp3",
    "wav": ".wav",
    "x-wav": ".wav",
    "m4a": ".m4a",
    "x-m4a": ".m4a",
    "mp4": ".m4a",
    "ogg": ".ogg",
}


class TranscriptionFailure(RuntimeError):
    """Raised when audio cannot be turned into non-empty text."""


def audio_suffix(audio_format: str | None) -> str:
    """Map a format hint (``webm``, ``audio/mp3``...) to a file suffix."""

    if not audio_format:
        return ".webm"
    hint = audio_format.strip().lower()
    hint = hint.split(";", 1)[0]
    hint = hint.rsplit("/", 1)[-1].lstrip(".")
    return _FORMAT_SUFFIXES.get(hint, ".webm")


@contextmanager
def scoped_audio_file(audio_bytes: bytes, suffix: str) -> Iterator[Path]:
    """Write audio into a private temp directory that is removed on exit."""

    with tempfile.TemporaryDirectory(prefix="emoji_rpg_audio_") as tmp_dir:
        path = Path(tmp_dir) / f"input{suffix}"
        path.write_bytes(audio_bytes)
        yield path


class TranscribeService:
    """High-level facade for streaming audio to Amazon Transcribe."""

    def __init__(
        self,
        aws: AwsConfig,
        config: TranscribeConfig,
        *,
        client: TranscribeStreamingClient | None = None,
    ) -> None:
        self._language_code = config.language_code
        self._media_sample_rate_hz = config.sample_rate_hz
        self._timeout_seconds = config.timeout_seconds

        if client is None:
            client = TranscribeStreamingClient(
                region=aws.region,
                credential_resolver=StaticCredentialResolver(
                    access_key_id=aws.access_key_id.get_secret_value(),
                    secret_access_key=aws.secret_access_key.get_secret_value(),
                ),
            )
        self._client = client

    async def transcribe(self, audio_bytes: bytes, audio_format: str | None = None) -> str:
        """Convert, stream and return the trimmed transcript.

        Empty input and empty transcripts are failures, not silence.
        """

        if not audio_bytes:
            raise TranscriptionFailure("The audio payload is empty.")

        try:
            transcript = await asyncio.wait_for(
                self._transcribe(audio_bytes, audio_format),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise TranscriptionFailure(
                f"Transcription did not finish within {self._timeout_seconds}s"
            ) from exc

        transcript = transcript.strip()
        if not transcript:
            raise TranscriptionFailure("No speech was recognised in the audio.")
        return transcript

    async def _transcribe(self, audio_bytes: bytes, audio_format: str | None) -> str:
        try:
            pcm_data = await run_in_threadpool(
                self._convert_to_pcm_sync, audio_bytes, audio_suffix(audio_format)
            )
        except TranscriptionFailure:
            raise
        except Exception as exc:
            raise TranscriptionFailure(f"Audio conversion failed: {exc}") from exc

        if not pcm_data:
            raise TranscriptionFailure("Audio conversion produced no samples.")

        try:
            stream = await self._client.start_stream_transcription(
                language_code=self._language_code,
                media_sample_rate_hz=self._media_sample_rate_hz,
                media_encoding="pcm",
            )
        except Exception as exc:
            logger.error("Could not open transcription stream: %s", exc)
            raise TranscriptionFailure(f"Streaming transcription failed: {exc}") from exc

        handler = _SimpleTranscriptHandler(stream.output_stream)

        async def write_chunks() -> None:
            for i in range(0, len(pcm_data), _CHUNK_SIZE):
                await stream.input_stream.send_audio_event(audio_chunk=pcm_data[i : i + _CHUNK_SIZE])
            await stream.input_stream.end_stream()

        writer = asyncio.ensure_future(write_chunks())
        reader = asyncio.ensure_future(handler.handle_events())
        try:
            await asyncio.gather(writer, reader)
        except Exception as exc:
            logger.error("Streaming transcription failed: %s", exc)
            raise TranscriptionFailure(f"Streaming transcription failed: {exc}") from exc
        finally:
            # Neither side may outlive the call, including on timeout.
            for task in (writer, reader):
                task.cancel()
            await asyncio.gather(writer, reader, return_exceptions=True)

        logger.info("Transcription complete. Length: %s", len(handler.transcript))
        return handler.transcript

    def _convert_to_pcm_sync(self, audio_bytes: bytes, suffix: str) -> bytes:
        """Run ffmpeg on a scoped temporary file so it can seek the container."""

        with scoped_audio_file(audio_bytes, suffix) as tmp_path:
            try:
                process = subprocess.run(
                    [
                        "ffmpeg",
                        "-y",
                        "-i", str(tmp_path),
                        "-f", "s16le",
                        "-ac", "1",
                        "-ar", str(self._media_sample_rate_hz),
                        "pipe:1",
                    ],
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    check=True,
                    timeout=_FFMPEG_TIMEOUT_SECONDS,
                )
            except subprocess.CalledProcessError as exc:
                error_msg = exc.stderr.decode("utf-8", errors="replace") if exc.stderr else "No stderr"
                logger.error("ffmpeg failed. stderr: %s", error_msg)
                raise TranscriptionFailure(f"ffmpeg failed to convert audio to PCM: {error_msg}") from exc
            except subprocess.TimeoutExpired as exc:
                raise TranscriptionFailure("ffmpeg timed out converting audio.") from exc

        if not process.stdout:
            logger.warning(
                "ffmpeg produced empty output. stderr: %s",
                (process.stderr or b"").decode("utf-8", errors="replace"),
            )
        return process.stdout


class _SimpleTranscriptHandler(TranscriptResultStreamHandler):
    def __init__(self, transcript_result_stream):
        super().__init__(transcript_result_stream)
        self.transcript = ""

    async def handle_transcript_event(self, transcript_event: TranscriptEvent):
        for result in transcript_event.transcript.results:
            if not result.is_partial and result.alternatives:
                self.transcript += result.alternatives[0].transcript + " "


__all__ = [
    "TranscribeService",
    "TranscriptionFailure",
    "audio_suffix",
    "scoped_audio_file",
]
