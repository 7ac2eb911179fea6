"""Static scenes served when live generation is unavailable.

Each entry is keyed by the state the player is *in* and holds the scene to
show next, so gameplay keeps advancing during an outage. Unknown labels get
the default (home) scene.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, Mapping

from emoji_rpg.services.response_contract import SceneRecord

OPENING_STATE = "home_full_health"

_OPENING_SCENE: dict[str, Any] = {
    "emojiScene": "🏠👤💰💰💰❤️❤️❤️",
    "description": "Welcome to Emoji RPG! You are home with 3 gold and full health.",
    "options": ["⚔️ Fight", "🌲 Forest", "💤 Rest"],
    "newGameState": OPENING_STATE,
    "ttsText": "Welcome to emoji RPG game! You are home with full health. What do you want to do?",
}

_DEFAULT_SCENE: dict[str, Any] = {
    "emojiScene": "🏠👤💰💰💰❤️❤️❤️",
    "description": "You are home with 3 gold and full health. What do you want to do?",
    "options": ["⚔️ Fight", "🌲 Forest", "💤 Rest"],
    "newGameState": OPENING_STATE,
    "ttsText": "You are home with full health. What do you want to do?",
}

_WOLF_ENCOUNTER: dict[str, Any] = {
    "emojiScene": "🌲🌲👤🐺👹🌲🌲",
    "description": "In the forest you encounter an enemy! Prepare for battle.",
    "options": ["⚔️ Attack", "🛡️ Defend", "🏃 Flee"],
    "newGameState": "combat_wolf",
    "ttsText": "In the forest you encounter an enemy! Prepare for battle.",
}

DEFAULT_SCENES: dict[str, dict[str, Any]] = {
    "home_full_health": _WOLF_ENCOUNTER,
    "forest_encounter": _WOLF_ENCOUNTER,
    "home_injured": {
        "emojiScene": "🏠👤💤❤️🖤🖤💰",
        "description": "You rest by the fire and your wounds slowly close.",
        "options": ["💤 Keep resting", "🌲 Forest", "🏘️ Town"],
        "newGameState": "home_full_health",
        "ttsText": "You rest by the fire and your wounds slowly close.",
    },
    "forest_entrance": {
        "emojiScene": "🌲🌲🌲👤🌲🌲🍄",
        "description": "Tall trees close in around you. Something rustles ahead.",
        "options": ["🔍 Investigate", "🏠 Go home", "🌲 Go deeper"],
        "newGameState": "forest_encounter",
        "ttsText": "Tall trees close in around you. Something rustles ahead.",
    },
    "combat_wolf": {
        "emojiScene": "🌲👤⚔️🐺💥❤️❤️",
        "description": "You strike the wolf and it limps away into the trees. You find a small pouch.",
        "options": ["🎒 Open pouch", "🌲 Go deeper", "🏠 Go home"],
        "newGameState": "treasure_found",
        "ttsText": "You strike the wolf and it limps away into the trees. You find a small pouch.",
    },
    "combat_goblin": {
        "emojiScene": "🌲👤🛡️👺⚔️❤️❤️",
        "description": "The goblin swings wildly but your shield holds. It flees, dropping its loot.",
        "options": ["💰 Take loot", "🏃 Chase it", "🏠 Go home"],
        "newGameState": "treasure_found",
        "ttsText": "The goblin swings wildly but your shield holds. It flees, dropping its loot.",
    },
    "treasure_found": {
        "emojiScene": "👤🎒💰💰💰💎✨",
        "description": "You gather the treasure. Your pack feels heavier already.",
        "options": ["🏘️ Visit town", "🌲 Explore more", "🏠 Go home"],
        "newGameState": "town_market",
        "ttsText": "You gather the treasure. Your pack feels heavier already.",
    },
    "town_market": {
        "emojiScene": "🏘️👤🛒🗡️🛡️🧪💰",
        "description": "Merchants call out their wares in the busy market square.",
        "options": ["🗡️ Buy sword", "🧪 Buy potion", "🍺 Tavern"],
        "newGameState": "town_tavern",
        "ttsText": "Merchants call out their wares in the busy market square.",
    },
    "town_tavern": {
        "emojiScene": "🍺👤🧙🎻🍖🕯️🗺️",
        "description": "An old wizard slides you a map to a hidden dungeon.",
        "options": ["🗺️ Follow map", "🍖 Eat", "🏠 Go home"],
        "newGameState": "dungeon_entrance",
        "ttsText": "An old wizard slides you a map to a hidden dungeon.",
    },
    "dungeon_entrance": {
        "emojiScene": "🏰🕳️👤🔦💀🕸️🚪",
        "description": "Cold air drifts from the dungeon door. A low growl echoes inside.",
        "options": ["🚪 Enter", "🔮 Cast light", "🏃 Retreat"],
        "newGameState": "boss_fight",
        "ttsText": "Cold air drifts from the dungeon door. A low growl echoes inside.",
    },
    "boss_fight": {
        "emojiScene": "🔥🐉👤⚔️🛡️❤️❤️🔥",
        "description": "The dragon roars and fills the hall with fire. This is the final battle!",
        "options": ["⚔️ Attack", "🛡️ Defend", "🔮 Magic", "🏃 Flee"],
        "newGameState": "victory",
        "ttsText": "The dragon roars and fills the hall with fire. This is the final battle!",
    },
    "game_over": {
        "emojiScene": "💀👤🕯️🌙🌲🌲",
        "description": "Your adventure ends here, but a new dawn awaits.",
        "options": ["🔄 Start over", "🏠 Go home"],
        "newGameState": "home_full_health",
        "ttsText": "Your adventure ends here, but a new dawn awaits.",
    },
    "victory": {
        "emojiScene": "🏆👤👑💰💰💰🎉✨",
        "description": "The dragon is defeated and the kingdom celebrates your victory!",
        "options": ["🔄 New adventure", "🏠 Go home"],
        "newGameState": "home_full_health",
        "ttsText": "The dragon is defeated and the kingdom celebrates your victory!",
    },
}


class FallbackTable:
    """Read-only state label → scene lookup with a default entry."""

    def __init__(
        self,
        entries: Mapping[str, SceneRecord],
        default: SceneRecord,
        opening: SceneRecord,
    ) -> None:
        self._entries = MappingProxyType(dict(entries))
        self._default = default
        self._opening = opening

    @classmethod
    def from_payloads(
        cls,
        entries: Mapping[str, Mapping[str, Any]],
        *,
        default: Mapping[str, Any],
        opening: Mapping[str, Any],
    ) -> "FallbackTable":
        return cls(
            {label: SceneRecord.model_validate(payload) for label, payload in entries.items()},
            default=SceneRecord.model_validate(default),
            opening=SceneRecord.model_validate(opening),
        )

    @property
    def default_scene(self) -> SceneRecord:
        return self._default

    @property
    def opening_scene(self) -> SceneRecord:
        return self._opening

    def lookup(self, state_label: str | None) -> SceneRecord:
        if not state_label:
            return self._default
        return self._entries.get(state_label.strip(), self._default)

    def states(self) -> Iterable[str]:
        return tuple(self._entries)


def build_default_table() -> FallbackTable:
    """Build the bundled table of canned scenes."""

    return FallbackTable.from_payloads(
        DEFAULT_SCENES,
        default=_DEFAULT_SCENE,
        opening=_OPENING_SCENE,
    )


__all__ = ["DEFAULT_SCENES", "FallbackTable", "OPENING_STATE", "build_default_table"]
