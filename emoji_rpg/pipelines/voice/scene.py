"""Scene-generation stage: LLM invocation plus strict contract validation."""

from __future__ import annotations

import logging
from typing import Protocol

from pydantic import ValidationError

from emoji_rpg.services.response_contract import SceneRecord
from emoji_rpg.telemetry import increment_soft_violation

from .prompts import build_scene_request, truncate_for_log
from .types import GenerationFailure

logger = logging.getLogger("emoji_rpg.pipeline")


class SceneLlm(Protocol):
    async def invoke(self, *, system_prompt: str, user_prompt: str) -> str: ...


class SceneGenerator:
    """Turn a player action and state label into a validated scene.

    Exactly one LLM call per scene; there are no retries. Any upstream,
    parsing or schema problem surfaces as :class:`GenerationFailure`.
    """

    def __init__(self, llm_client: SceneLlm) -> None:
        self._llm = llm_client

    async def generate(self, action_text: str, state_label: str) -> SceneRecord:
        if not action_text or not action_text.strip():
            raise GenerationFailure("Player action text is empty.")

        request = build_scene_request(action_text.strip(), state_label)

        try:
            raw_response = await self._llm.invoke(
                system_prompt=request.system_prompt,
                user_prompt=request.user_prompt,
            )
        except Exception as exc:
            raise GenerationFailure(f"Scene LLM call failed: {exc}") from exc

        if not raw_response or not raw_response.strip():
            raise GenerationFailure("Scene LLM returned an empty response.")

        logger.info(
            "Raw scene response state=%s action=%s: %s",
            request.state_label,
            truncate_for_log(request.action_text, 120),
            truncate_for_log(raw_response),
        )

        try:
            scene = SceneRecord.from_json(raw_response)
        except ValidationError as exc:
            logger.warning("Scene JSON rejected state=%s: %s", request.state_label, exc)
            raise GenerationFailure("Scene LLM output does not match the scene schema.") from exc

        for violation in scene.soft_constraint_violations():
            increment_soft_violation(violation)
            logger.warning(
                "Scene outside recommended range (%s) state=%s emojis=%s options=%s",
                violation,
                request.state_label,
                scene.emoji_count,
                len(scene.options),
            )
        return scene


__all__ = ["SceneGenerator", "SceneLlm"]
