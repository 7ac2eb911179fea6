"""Shared fixtures: credentials for settings, fakes for the three AI upstreams."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

_LOG_DIR = Path(tempfile.mkdtemp(prefix="emoji_rpg_test_logs_"))
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test-access-key")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test-secret-key")
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("LOG_FILE", str(_LOG_DIR / "app.log"))
os.environ.setdefault("PIPELINE_LOG_FILE", str(_LOG_DIR / "voice_pipeline.log"))
os.environ.setdefault("TRANSCRIPT_LOG_FILE", str(_LOG_DIR / "transcripts.log"))

from emoji_rpg.pipelines.voice import (  # noqa: E402
    GenerationFailure,
    VoiceActionOrchestrator,
    build_default_table,
)
from emoji_rpg.services import SceneRecord, SynthesisFailure, TranscriptionFailure  # noqa: E402

GENERATED_SCENE = SceneRecord.model_validate(
    {
        "emojiScene": "🌲🌲🌲👤🍄🌲🌲",
        "description": "You step into the whispering forest.",
        "options": ["🔍 Look around", "🏠 Go home", "🌲 Go deeper"],
        "newGameState": "forest_entrance",
        "ttsText": "You step into the whispering forest.",
    }
)


class FakeTranscriber:
    def __init__(self, transcript: str = "go to the forest", error: Exception | None = None) -> None:
        self.transcript = transcript
        self.error = error
        self.calls: list[tuple[bytes, str | None]] = []

    async def transcribe(self, audio_bytes: bytes, audio_format: str | None = None) -> str:
        self.calls.append((audio_bytes, audio_format))
        if self.error is not None:
            raise self.error
        return self.transcript


class FakeGenerator:
    def __init__(self, scene: SceneRecord = GENERATED_SCENE, error: Exception | None = None) -> None:
        self.scene = scene
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def generate(self, action_text: str, state_label: str) -> SceneRecord:
        self.calls.append((action_text, state_label))
        if self.error is not None:
            raise self.error
        return self.scene


class FakeSynthesizer:
    def __init__(self, audio: bytes = b"mp3-bytes", error: Exception | None = None) -> None:
        self.audio = audio
        self.error = error
        self.calls: list[str] = []

    async def synthesize(self, text: str) -> bytes:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.audio


@pytest.fixture
def fallback_table():
    return build_default_table()


@pytest.fixture
def transcriber() -> FakeTranscriber:
    return FakeTranscriber()


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def synthesizer() -> FakeSynthesizer:
    return FakeSynthesizer()


@pytest.fixture
def failing_transcriber() -> FakeTranscriber:
    return FakeTranscriber(error=TranscriptionFailure("upstream unavailable"))


@pytest.fixture
def failing_generator() -> FakeGenerator:
    return FakeGenerator(error=GenerationFailure("upstream unavailable"))


@pytest.fixture
def failing_synthesizer() -> FakeSynthesizer:
    return FakeSynthesizer(error=SynthesisFailure("polly down"))


@pytest.fixture
def make_orchestrator(fallback_table, transcriber, generator, synthesizer):
    """Build an orchestrator, defaulting every collaborator to a happy fake."""

    def _make(**overrides) -> VoiceActionOrchestrator:
        kwargs = {
            "transcriber": transcriber,
            "generator": generator,
            "synthesizer": synthesizer,
            "fallback_table": fallback_table,
        }
        kwargs.update(overrides)
        return VoiceActionOrchestrator(**kwargs)

    return _make
