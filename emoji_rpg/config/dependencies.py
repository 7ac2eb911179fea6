"""Construction of the long-lived service objects behind the API."""

from __future__ import annotations

from emoji_rpg.pipelines.voice import (
    FallbackTable,
    SceneGenerator,
    VoiceActionOrchestrator,
    build_default_table,
)
from emoji_rpg.services import BedrockLlmClient, SpeechSynthesizer, TranscribeService

from .settings import Settings


def build_orchestrator(
    settings: Settings,
    *,
    fallback_table: FallbackTable | None = None,
) -> VoiceActionOrchestrator:
    """Create one instance of each upstream client and wire the pipeline."""

    return VoiceActionOrchestrator(
        transcriber=TranscribeService(settings.aws, settings.transcribe),
        generator=SceneGenerator(BedrockLlmClient(settings.aws, settings.bedrock)),
        synthesizer=SpeechSynthesizer(settings.aws, settings.polly),
        fallback_table=fallback_table or build_default_table(),
        max_audio_bytes=settings.game.max_audio_bytes,
        new_game_label=settings.game.new_game_label,
    )


__all__ = ["build_orchestrator"]
