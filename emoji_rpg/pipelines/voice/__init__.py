"""Voice-action pipeline package.

Modules follow the order in which `/api/voice-action` executes:

1. `ingestion` – decode the base64/data-URL audio and enforce the size ceiling.
2. `prompts` – assemble the game-master system/user prompts.
3. `scene` – call the language model and validate the scene contract.
4. `fallback` – canned scenes keyed by state label.
5. `orchestrator` – sequence transcription, generation and narration.
"""

from .fallback import FallbackTable, build_default_table
from .ingestion import decode_audio_payload, detect_audio_format
from .orchestrator import NEW_GAME_LABEL, VoiceActionOrchestrator
from .prompts import build_scene_request
from .scene import SceneGenerator
from .types import (
    GenerationFailure,
    RequestValidationError,
    SceneRequest,
    VoiceActionOutcome,
    VoiceActionRequest,
    VoiceActionResponse,
)

__all__ = [
    "FallbackTable",
    "GenerationFailure",
    "NEW_GAME_LABEL",
    "RequestValidationError",
    "SceneGenerator",
    "SceneRequest",
    "VoiceActionOrchestrator",
    "VoiceActionOutcome",
    "VoiceActionRequest",
    "VoiceActionResponse",
    "build_default_table",
    "build_scene_request",
    "decode_audio_payload",
    "detect_audio_format",
]
