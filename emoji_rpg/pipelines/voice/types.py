"""Typed containers and errors shared across the voice-action pipeline.

These live in their own module so the other stages (`ingestion`, `prompts`,
`scene`, `fallback`, `orchestrator`) can import them without creating
circular dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from emoji_rpg.services.response_contract import SceneRecord


class RequestValidationError(ValueError):
    """Client-caused problem with a voice-action request (HTTP 400)."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class GenerationFailure(RuntimeError):
    """Raised when the language model cannot produce a valid scene."""


@dataclass(frozen=True)
class VoiceActionRequest:
    """What the player sent: text and/or encoded audio plus the state label."""

    state_label: str | None
    action: str | None = None
    audio_payload: str | None = None
    audio_format: str | None = None


@dataclass(frozen=True)
class SceneRequest:
    """Normalized payload handed to the scene-generation LLM call."""

    action_text: str
    state_label: str
    system_prompt: str
    user_prompt: str


@dataclass(frozen=True)
class VoiceActionResponse:
    """A renderable scene plus the optional narration and fallback flags."""

    scene: SceneRecord
    audio_payload: bytes | None = None
    transcribed_text: str | None = None
    input_fallback: bool = False
    scene_fallback: bool = False

    @property
    def used_fallback(self) -> bool:
        return self.input_fallback or self.scene_fallback


@dataclass(frozen=True)
class VoiceActionOutcome:
    """Result of one orchestrator run; always carries an HTTP status."""

    status_code: int
    response: VoiceActionResponse | None = None
    error: str | None = None
    details: str | None = None

    @property
    def ok(self) -> bool:
        return self.status_code < 400


__all__ = [
    "GenerationFailure",
    "RequestValidationError",
    "SceneRequest",
    "VoiceActionOutcome",
    "VoiceActionRequest",
    "VoiceActionResponse",
]
