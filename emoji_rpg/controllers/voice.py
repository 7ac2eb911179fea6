"""Voice-action endpoint.

The heavy lifting lives in `emoji_rpg.pipelines.voice.orchestrator`; this
controller only maps the JSON body in and the pipeline outcome out.
"""

import logging
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from emoji_rpg.controllers.dependencies import OrchestratorDep
from emoji_rpg.pipelines.voice import VoiceActionOutcome
from emoji_rpg.views import ErrorResponse, VoiceActionBody, VoiceActionResponseBody

router = APIRouter(prefix="/api", tags=["game"])

logger = logging.getLogger(__name__)


def outcome_content(outcome: VoiceActionOutcome) -> dict[str, Any]:
    """Render an outcome as the success body or the error body."""

    scene_body = (
        VoiceActionResponseBody.from_domain(outcome.response).to_json()
        if outcome.response is not None
        else None
    )
    if outcome.ok and scene_body is not None:
        return scene_body

    error = ErrorResponse(
        error=outcome.error or "Internal server error",
        details=outcome.details,
        fallback=scene_body,
    )
    return error.model_dump(exclude_none=True)


@router.post(
    "/voice-action",
    response_model=VoiceActionResponseBody,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def voice_action(body: VoiceActionBody, orchestrator: OrchestratorDep) -> JSONResponse:
    """Turn a spoken or typed action into the next scene with narration."""

    outcome = await orchestrator.handle(body.to_request())
    if outcome.response is not None:
        logger.info(
            "Voice action status=%s state=%s -> %s fallback=%s audio=%s",
            outcome.status_code,
            body.game_state,
            outcome.response.scene.new_state_label,
            outcome.response.used_fallback,
            outcome.response.audio_payload is not None,
        )
    return JSONResponse(status_code=outcome.status_code, content=outcome_content(outcome))
