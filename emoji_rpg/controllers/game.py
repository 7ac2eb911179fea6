"""Game-state discovery endpoint."""

from fastapi import APIRouter

from emoji_rpg.controllers.dependencies import FallbackTableDep
from emoji_rpg.config.settings import settings
from emoji_rpg.views import GameStateCatalog, SceneView

router = APIRouter(prefix="/api", tags=["game"])


@router.get("/game-state", response_model=GameStateCatalog, response_model_by_alias=True)
async def game_state(fallback_table: FallbackTableDep) -> GameStateCatalog:
    """Expose the opening scene and the state labels with canned scenes."""

    opening = fallback_table.opening_scene
    return GameStateCatalog(
        new_game_state=settings.game.new_game_label,
        initial_scene=SceneView.model_validate(opening.to_wire()),
        states=sorted(fallback_table.states()),
    )
