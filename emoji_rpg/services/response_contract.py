"""Pydantic models for validating scene JSON produced by the language model.

Model output is untrusted text. It only becomes a :class:`SceneRecord` after
passing through :meth:`SceneRecord.from_json`, so the rest of the pipeline
always works with normalized, type-safe scenes.
"""

from __future__ import annotations

import json
import unicodedata
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

EMOJI_RANGE = (6, 12)
OPTIONS_RANGE = (2, 4)

# Characters that decorate a symbol rather than being one: variation
# selectors and combining marks (Mn/Me), ZWJ (Cf), skin tones (Sk).
_NON_SYMBOL_CATEGORIES = frozenset({"Mn", "Me", "Cf", "Sk"})
_REGIONAL_INDICATORS = (0x1F1E6, 0x1F1FF)


class SceneRecord(BaseModel):
    """One rendered game moment."""

    emoji_scene: str = Field(alias="emojiScene", min_length=1)
    description: str = Field(min_length=1)
    options: tuple[str, ...] = Field(min_length=1)
    new_state_label: str = Field(alias="newGameState", min_length=1)
    speech_text: str = Field(alias="ttsText", min_length=1)

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        extra="ignore",
        str_strip_whitespace=True,
    )

    @field_validator("options", mode="before")
    @classmethod
    def require_string_options(cls, value: Any) -> Any:
        if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
            raise ValueError("options must be a list of strings")
        for item in value:
            if not isinstance(item, str):
                raise ValueError("every option must be a string")
        return value

    @field_validator("options")
    @classmethod
    def reject_blank_options(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        cleaned = tuple(item.strip() for item in value)
        if any(not item for item in cleaned):
            raise ValueError("options must not contain blank entries")
        return cleaned

    @field_validator("emoji_scene", "description", "new_state_label", "speech_text", mode="before")
    @classmethod
    def require_text(cls, value: Any) -> Any:
        if not isinstance(value, str):
            raise ValueError("expected a string")
        return value

    @property
    def emoji_count(self) -> int:
        return count_symbols(self.emoji_scene)

    def soft_constraint_violations(self) -> list[str]:
        """Return the recommended-range checks this scene misses.

        These never invalidate a scene; callers log and count them.
        """

        violations: list[str] = []
        low, high = EMOJI_RANGE
        if not low <= self.emoji_count <= high:
            violations.append("emoji_count")
        low, high = OPTIONS_RANGE
        if not low <= len(self.options) <= high:
            violations.append("options_count")
        return violations

    def to_wire(self) -> dict[str, Any]:
        """Serialize using the client-facing camelCase field names."""

        payload = self.model_dump(by_alias=True)
        payload["options"] = list(self.options)
        return payload

    @classmethod
    def from_json(cls, payload: str) -> "SceneRecord":
        cleaned = _clean_json_payload(payload)
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise ValidationError.from_exception_data(
                "SceneRecord",
                line_errors=[{"type": "value_error", "loc": ("__root__",), "input": payload, "ctx": {"error": str(exc)}}],
            )
        return cls.model_validate(data)


def count_symbols(text: str) -> int:
    """Count displayed symbols, ignoring selectors, joiners and modifiers.

    A flag is a pair of regional indicators and counts once.
    """

    count = 0
    open_flag = False
    for char in text:
        if char.isspace() or unicodedata.category(char) in _NON_SYMBOL_CATEGORIES:
            continue
        if _REGIONAL_INDICATORS[0] <= ord(char) <= _REGIONAL_INDICATORS[1]:
            if open_flag:
                open_flag = False
                continue
            open_flag = True
        else:
            open_flag = False
        count += 1
    return count


def _clean_json_payload(payload: str) -> str:
    """Strip Markdown code blocks and find the first/last brace to extract JSON."""
    if not payload:
        return ""

    cleaned = payload.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]

    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]

    cleaned = cleaned.strip()

    start = cleaned.find("{")
    end = cleaned.rfind("}")

    if start != -1 and end != -1 and end > start:
        cleaned = cleaned[start : end + 1]

    return cleaned


__all__ = [
    "EMOJI_RANGE",
    "OPTIONS_RANGE",
    "SceneRecord",
    "count_symbols",
]
