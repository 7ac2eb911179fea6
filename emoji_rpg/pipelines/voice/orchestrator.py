"""Voice-action orchestration: transcription, scene generation, narration.

``VoiceActionOrchestrator.handle`` runs the stages in order:

1. Validate the state label (client error when missing).
2. New sessions get the opening scene; the generator is never called.
3. Resolve the player's words from audio (transcribed) or text.
4. Generate the next scene, or take it from the fallback table.
5. Narrate the scene with TTS, best-effort.
6. Assemble the response.

``handle`` never raises: client problems become 400 outcomes, anything
unexpected becomes a 500 outcome that still carries a fallback scene.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator, Protocol

from emoji_rpg.services.response_contract import SceneRecord
from emoji_rpg.services.speech import SynthesisFailure
from emoji_rpg.services.transcribe import TranscriptionFailure
from emoji_rpg.telemetry import increment_fallback, observe_stage

from .fallback import FallbackTable
from .ingestion import decode_audio_payload, detect_audio_format
from .types import (
    GenerationFailure,
    RequestValidationError,
    VoiceActionOutcome,
    VoiceActionRequest,
    VoiceActionResponse,
)

logger = logging.getLogger("emoji_rpg.pipeline")
transcript_logger = logging.getLogger("emoji_rpg.logs.transcript")

DEFAULT_MAX_AUDIO_BYTES = 10 * 1024 * 1024
NEW_GAME_LABEL = "new_game"


class Transcriber(Protocol):
    async def transcribe(self, audio_bytes: bytes, audio_format: str | None = None) -> str: ...


class Generator(Protocol):
    async def generate(self, action_text: str, state_label: str) -> SceneRecord: ...


class Synthesizer(Protocol):
    async def synthesize(self, text: str) -> bytes: ...


@contextmanager
def _timed_stage(stage: str) -> Iterator[None]:
    start = time.perf_counter()
    failed = False
    try:
        yield
    except Exception:
        failed = True
        raise
    finally:
        observe_stage(stage, time.perf_counter() - start, failed=failed)


class VoiceActionOrchestrator:
    """Sequence the AI stages for one voice action and degrade on failure."""

    def __init__(
        self,
        *,
        transcriber: Transcriber,
        generator: Generator,
        synthesizer: Synthesizer,
        fallback_table: FallbackTable,
        max_audio_bytes: int = DEFAULT_MAX_AUDIO_BYTES,
        new_game_label: str = NEW_GAME_LABEL,
    ) -> None:
        self._transcriber = transcriber
        self._generator = generator
        self._synthesizer = synthesizer
        self._fallback = fallback_table
        self._max_audio_bytes = max_audio_bytes
        self._new_game_label = new_game_label

    async def handle(self, request: VoiceActionRequest) -> VoiceActionOutcome:
        try:
            response = await self._run(request)
        except RequestValidationError as exc:
            logger.info(
                "Voice action rejected state=%s: %s (%s)",
                request.state_label,
                exc.message,
                exc.details,
            )
            return VoiceActionOutcome(status_code=400, error=exc.message, details=exc.details)
        except Exception as exc:
            logger.exception("Unexpected voice pipeline failure state=%s", request.state_label)
            return self._internal_error(request, exc)

        return VoiceActionOutcome(status_code=200, response=response)

    async def _run(self, request: VoiceActionRequest) -> VoiceActionResponse:
        state_label = (request.state_label or "").strip()
        if not state_label:
            raise RequestValidationError("Missing gameState", "gameState is required.")

        if state_label == self._new_game_label:
            scene = self._fallback.opening_scene
            return VoiceActionResponse(scene=scene, audio_payload=await self._narrate(scene))

        action_text, transcribed_text, input_fallback = await self._resolve_action(request)

        scene_fallback = False
        try:
            with _timed_stage("generation"):
                scene = await self._generator.generate(action_text, state_label)
        except GenerationFailure as exc:
            logger.warning("Scene generation failed state=%s: %s", state_label, exc)
            scene, scene_fallback = self._fallback.lookup(state_label), True
        except Exception:
            logger.exception("Scene generator crashed state=%s", state_label)
            scene, scene_fallback = self._fallback.lookup(state_label), True

        if scene_fallback:
            increment_fallback("scene")

        transcript_logger.info(
            "scene | state=%s -> %s | fallback=%s | text=%s",
            state_label,
            scene.new_state_label,
            scene_fallback,
            scene.description,
        )

        return VoiceActionResponse(
            scene=scene,
            audio_payload=await self._narrate(scene),
            transcribed_text=transcribed_text,
            input_fallback=input_fallback,
            scene_fallback=scene_fallback,
        )

    async def _resolve_action(self, request: VoiceActionRequest) -> tuple[str, str | None, bool]:
        """Return ``(action_text, transcribed_text, input_fallback)``."""

        typed_action = (request.action or "").strip() or None

        if request.audio_payload:
            audio_bytes = decode_audio_payload(request.audio_payload, self._max_audio_bytes)
            audio_format = detect_audio_format(request.audio_payload, request.audio_format)
            try:
                with _timed_stage("transcription"):
                    transcript = (await self._transcriber.transcribe(audio_bytes, audio_format) or "").strip()
                    if not transcript:
                        raise TranscriptionFailure("No speech was recognised in the audio.")
            except Exception as exc:
                if not isinstance(exc, TranscriptionFailure):
                    logger.exception("Transcriber crashed state=%s", request.state_label)
                if typed_action is None:
                    raise RequestValidationError("Audio transcription failed", str(exc)) from exc
                logger.warning(
                    "Transcription failed, using typed action state=%s: %s",
                    request.state_label,
                    exc,
                )
                increment_fallback("input")
                return typed_action, None, True

            transcript_logger.info("player | state=%s | text=%s", request.state_label, transcript)
            return transcript, transcript, False

        if typed_action is not None:
            transcript_logger.info("player | state=%s | typed=%s", request.state_label, typed_action)
            return typed_action, None, False

        raise RequestValidationError(
            "No action provided",
            "Send either 'action' text or 'audioData'.",
        )

    async def _narrate(self, scene: SceneRecord) -> bytes | None:
        try:
            with _timed_stage("synthesis"):
                return await self._synthesizer.synthesize(scene.speech_text)
        except SynthesisFailure as exc:
            logger.warning("Speech synthesis failed, replying without audio: %s", exc)
        except Exception:
            logger.exception("Speech synthesizer crashed, replying without audio")
        return None

    def _internal_error(self, request: VoiceActionRequest, exc: Exception) -> VoiceActionOutcome:
        try:
            scene = self._fallback.lookup(request.state_label)
            response = VoiceActionResponse(scene=scene, scene_fallback=True)
        except Exception:
            logger.exception("Fallback scene unavailable after internal error")
            return VoiceActionOutcome(status_code=500, error="Internal server error")

        increment_fallback("internal")
        return VoiceActionOutcome(
            status_code=500,
            response=response,
            error="Internal server error",
            details=f"Failed to process voice action ({type(exc).__name__}).",
        )


__all__ = ["NEW_GAME_LABEL", "VoiceActionOrchestrator"]
