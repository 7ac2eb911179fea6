"""Service layer helpers for external integrations."""

from .llm_client import BedrockLlmClient, LlmInvocationError
from .response_contract import SceneRecord
from .speech import SpeechSynthesizer, SynthesisFailure
from .transcribe import TranscribeService, TranscriptionFailure

__all__ = [
    "BedrockLlmClient",
    "LlmInvocationError",
    "SceneRecord",
    "SpeechSynthesizer",
    "SynthesisFailure",
    "TranscribeService",
    "TranscriptionFailure",
]
