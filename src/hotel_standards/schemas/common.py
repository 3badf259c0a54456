"""Shared building blocks for the canonical dataset models."""

from typing import Dict, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

# ── Constants ────────────────────────────────────────────────────────

STAR_KEYS: Tuple[str, ...] = ("1", "2", "3", "4", "5")

LANGUAGES: Tuple[str, ...] = ("uz", "ru", "en")

DEFAULT_TYPE_KEY = "hotels_and_similar"

# Points stay integral when the source data is integral.
Points = Union[int, float]


def empty_star_map(value: bool = False) -> Dict[str, bool]:
    """Return a map with exactly the five star keys set to ``value``."""
    return {key: value for key in STAR_KEYS}


# ── Models ───────────────────────────────────────────────────────────


class LocalizedText(BaseModel):
    """Text available in Uzbek, Russian and English."""

    model_config = ConfigDict(frozen=True)

    uz: str = Field(default="", description="Uzbek text")
    ru: str = Field(default="", description="Russian text")
    en: str = Field(default="", description="English text")

    def get(self, lang: str = "en") -> str:
        """Return text for ``lang``, falling back to en, uz, then ru."""
        for candidate in (lang, "en", "uz", "ru"):
            value = getattr(self, candidate, "") if candidate in LANGUAGES else ""
            if value:
                return value
        return ""

    @classmethod
    def uniform(cls, text: str) -> "LocalizedText":
        """Same text in every language (used for raw-key fallbacks)."""
        return cls(uz=text, ru=text, en=text)


DEFAULT_TYPE_NAME = LocalizedText(
    uz="Mehmonxonalar va shunga o'xshash joylashtirish vositalari",
    ru="Гостиницы и аналогичные средства размещения",
    en="Hotels and similar accommodation facilities",
)
