"""Amazon Polly speech synthesis for scene narration."""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from emoji_rpg.config.settings import AwsConfig, PollyConfig
from emoji_rpg.services.aws import create_boto3_client

logger = logging.getLogger(__name__)


class SynthesisFailure(RuntimeError):
    """Raised when Polly cannot produce audio for a scene."""


class SpeechSynthesizer:
    """Turn short narration text into MP3 bytes with Amazon Polly."""

    def __init__(
        self,
        aws: AwsConfig,
        config: PollyConfig,
        *,
        client: Any | None = None,
    ) -> None:
        self._voice_id = config.voice_id
        self._engine = config.engine
        self._client = client or create_boto3_client(
            "polly",
            aws,
            timeout_seconds=config.timeout_seconds,
        )

    async def synthesize(self, text: str) -> bytes:
        text = (text or "").strip()
        if not text:
            raise SynthesisFailure("Nothing to synthesize.")

        try:
            response: dict[str, Any] = await run_in_threadpool(
                self._client.synthesize_speech,
                Text=text,
                VoiceId=self._voice_id,
                Engine=self._engine,
                OutputFormat="mp3",
            )
        except (BotoCoreError, ClientError) as exc:
            logger.exception("Polly synth failed for voice '%s'", self._voice_id)
            raise SynthesisFailure(f"Failed to synthesize speech: {exc}") from exc

        audio_stream = response.get("AudioStream")
        if audio_stream is None:
            raise SynthesisFailure("Polly returned no audio stream.")
        try:
            audio_bytes = await run_in_threadpool(audio_stream.read)
        except BotoCoreError as exc:
            raise SynthesisFailure(f"Failed to read Polly audio stream: {exc}") from exc
        finally:
            close = getattr(audio_stream, "close", None)
            if callable(close):
                close()
        if not audio_bytes:
            raise SynthesisFailure("Polly returned an empty audio stream.")
        return audio_bytes


__all__ = ["SpeechSynthesizer", "SynthesisFailure"]
