"""Pydantic schemas used as views in the MVC architecture."""

from .common import ErrorResponse
from .game import GameStateCatalog, SceneView
from .voice import VoiceActionBody, VoiceActionResponseBody

__all__ = [
    "ErrorResponse",
    "GameStateCatalog",
    "SceneView",
    "VoiceActionBody",
    "VoiceActionResponseBody",
]
