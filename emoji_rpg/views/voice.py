"""Schemas for the voice-action endpoint."""

from __future__ import annotations

import base64
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from emoji_rpg.pipelines.voice import VoiceActionRequest, VoiceActionResponse


class VoiceActionBody(BaseModel):
    """Incoming JSON body; `gameState` is checked by the pipeline, not here."""

    action: Optional[str] = None
    audio_data: Optional[str] = Field(default=None, alias="audioData")
    game_state: Optional[str] = Field(default=None, alias="gameState")
    audio_format: Optional[str] = Field(default=None, alias="audioFormat")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_request(self) -> VoiceActionRequest:
        return VoiceActionRequest(
            state_label=self.game_state,
            action=self.action,
            audio_payload=self.audio_data,
            audio_format=self.audio_format,
        )


class VoiceActionResponseBody(BaseModel):
    emoji_scene: str = Field(alias="emojiScene")
    description: str
    options: list[str]
    new_game_state: str = Field(alias="newGameState")
    tts_text: str = Field(alias="ttsText")
    audio_data: Optional[str] = Field(default=None, alias="audioData")
    transcription: Optional[str] = None
    fallback_used: bool = Field(alias="fallbackUsed")
    input_fallback_used: bool = Field(alias="inputFallbackUsed")
    scene_fallback_used: bool = Field(alias="sceneFallbackUsed")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_domain(cls, response: VoiceActionResponse) -> "VoiceActionResponseBody":
        scene = response.scene
        audio_data = None
        if response.audio_payload:
            audio_data = base64.b64encode(response.audio_payload).decode("ascii")
        return cls(
            emoji_scene=scene.emoji_scene,
            description=scene.description,
            options=list(scene.options),
            new_game_state=scene.new_state_label,
            tts_text=scene.speech_text,
            audio_data=audio_data,
            transcription=response.transcribed_text,
            fallback_used=response.used_fallback,
            input_fallback_used=response.input_fallback,
            scene_fallback_used=response.scene_fallback,
        )

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
