"""Schemas for game-state discovery."""

from pydantic import BaseModel, ConfigDict, Field


class SceneView(BaseModel):
    emoji_scene: str = Field(alias="emojiScene")
    description: str
    options: list[str]
    new_game_state: str = Field(alias="newGameState")
    tts_text: str = Field(alias="ttsText")

    model_config = ConfigDict(populate_by_name=True)


class GameStateCatalog(BaseModel):
    new_game_state: str = Field(alias="newGameState")
    initial_scene: SceneView = Field(alias="initialScene")
    states: list[str]

    model_config = ConfigDict(populate_by_name=True)
