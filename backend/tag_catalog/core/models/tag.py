from __future__ import annotations

from enum import Enum

from pydantic import Field, field_validator

from .base import AppBaseModel


class TagCategory(str, Enum):
    """Fixed taxonomy for music descriptor tags.

    Declaration order is significant: the 1-based position of each member is
    the number the classifier answers with.
    """

    TEMPO_METER = "Tempo & Meter"
    ERA_VIBE = "Era / Time-Period Vibe"
    CORE_GENRE = "Core Genre Family"
    SUB_GENRE = "Sub-Genre & Fusion Styles"
    INSTRUMENTATION = "Instrumentation & Sound Sources"
    VOCALS = "Vocal Characteristics"
    MOOD = "Mood / Emotion"
    PRODUCTION = "Production & Mix Aesthetics"
    RHYTHM_STRUCTURE = "Rhythmic & Structural Traits"
    CULTURAL = "Cultural / Regional Flavor"
    LANGUAGE_LYRICS = "Language & Lyrical Context"
    THEMES = "Themes & Imagery"
    MISC = "Miscellaneous / Meta"

    @classmethod
    def ordered(cls) -> list[TagCategory]:
        return list(cls)

    @classmethod
    def from_position(cls, position: int) -> TagCategory:
        """Return the member at the given 1-based position."""
        members = cls.ordered()
        if not 1 <= position <= len(members):
            raise IndexError(f"Category position {position} out of range 1..{len(members)}")
        return members[position - 1]


FALLBACK_CATEGORY = TagCategory.MISC


class Tag(AppBaseModel):
    """Stored music tag with its resolved category."""

    id: int | str = Field(description="Storage-assigned identifier")
    name: str = Field(min_length=1, description="Tag text exactly as captured")
    category: TagCategory = Field(default=FALLBACK_CATEGORY)

    @field_validator("category", mode="before")
    @classmethod
    def default_missing_category(cls, v: object) -> object:
        # Rows written before a category was known carry NULL
        return FALLBACK_CATEGORY if v is None else v

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": 1,
                    "name": "heavy metal",
                    "category": "Core Genre Family",
                }
            ]
        }
    }
