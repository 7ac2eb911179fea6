"""Prompt construction for the scene-generation stage.

The system prompt is fixed: it pins the output to the scene JSON contract
and a small emoji vocabulary. Only the user prompt varies per turn.
"""

from __future__ import annotations

import json
import logging

from .types import SceneRequest

logger = logging.getLogger("emoji_rpg.pipeline")

GAME_MASTER_PROMPT = """You are the Game Master for an emoji-based RPG adventure.

RULES:
- Always respond with emoji scenes (6-12 emojis representing the current scenario)
- Maintain consistent game world and character progression
- Allow creative player actions while preventing impossible/game-breaking moves
- Generate 2-4 action options as emoji + text combinations
- Keep descriptions concise and engaging (1-2 sentences max)
- Keep the tone light and family friendly
- Current game state will be provided - maintain continuity

RESPONSE FORMAT:
Respond with a single valid JSON object containing exactly these fields:
{
  "emojiScene": "String of 6-12 emojis representing current scenario",
  "description": "Brief description in English (1-2 sentences)",
  "options": ["Array of 2-4 possible actions (emoji + text)"],
  "newGameState": "snake_case identifier of the new game state",
  "ttsText": "Same as description, optimized for text-to-speech"
}

EMOJI VOCABULARY:
- 👤 = Player character
- ❤️ = Health points
- 💰 = Gold/currency
- 🏠 = Home/safe area
- 🌲 = Forest/wilderness
- ⚔️ = Combat/weapon
- 🛡️ = Defense/armor
- 🔮 = Magic/mystical
- 👹 = Enemy/monster
- 🎒 = Inventory/items

Do not add any text outside the JSON object."""


def truncate_for_log(value: str, max_length: int = 500) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


def build_user_prompt(action_text: str, state_label: str) -> str:
    # json.dumps quotes the player's words so they cannot break out of the field.
    return (
        f"Player action: {json.dumps(action_text, ensure_ascii=False)}\n"
        f"Current game state: {json.dumps(state_label, ensure_ascii=False)}\n\n"
        "Generate the next scene based on this action."
    )


def build_scene_request(action_text: str, state_label: str) -> SceneRequest:
    """Assemble prompts and metadata for the scene LLM invocation."""

    user_prompt = build_user_prompt(action_text, state_label)
    logger.info(
        "Scene prompt built state=%s USER> %s",
        state_label,
        truncate_for_log(user_prompt),
    )
    return SceneRequest(
        action_text=action_text,
        state_label=state_label,
        system_prompt=GAME_MASTER_PROMPT,
        user_prompt=user_prompt,
    )


__all__ = ["GAME_MASTER_PROMPT", "build_scene_request", "build_user_prompt", "truncate_for_log"]
