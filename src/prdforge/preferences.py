"""Display preferences: fonts and themes."""

from __future__ import annotations

from prdforge.errors import StorageError
from prdforge.logging import get_logger
from prdforge.storage.protocol import KeyValueStore

logger = get_logger(__name__)

FONTS: dict[str, str] = {
    "font-inter": "Inter",
    "font-roboto": "Roboto",
    "font-lato": "Lato",
    "font-arial": "Arial",
}

THEMES: dict[str, str] = {
    "theme-dark": "Dark",
    "theme-light": "Light",
    "theme-blueprint": "Blueprint",
    "theme-matrix": "Matrix",
}

DEFAULT_THEME = "theme-dark"

THEME_BACKGROUNDS: dict[str, str] = {
    "theme-dark": "#1A1A2E",
    "theme-light": "#ffffff",
    "theme-blueprint": "#F0F4F8",
    "theme-matrix": "#010101",
}

THEME_FOREGROUNDS: dict[str, str] = {
    "theme-dark": "#E0E0E0",
    "theme-light": "#1F2937",
    "theme-blueprint": "#102A43",
    "theme-matrix": "#00FF41",
}


def theme_background(theme: str) -> str:
    """Page background colour for a theme; unknown themes fall back to dark."""

    return THEME_BACKGROUNDS.get(theme, THEME_BACKGROUNDS[DEFAULT_THEME])


def theme_foreground(theme: str) -> str:
    return THEME_FOREGROUNDS.get(theme, THEME_FOREGROUNDS[DEFAULT_THEME])


class FontPreference:
    """Selected font persisted as a single string."""

    def __init__(self, store: KeyValueStore, key: str, default: str = "font-inter") -> None:
        if default not in FONTS:
            raise ValueError(f"Unknown default font: {default}")
        self._store = store
        self._key = key
        self._default = default

    def load(self) -> str:
        try:
            value = self._store.get(self._key)
        except StorageError:
            logger.exception("Failed to read font preference key=%s", self._key)
            return self._default
        if value is None:
            return self._default
        if value not in FONTS:
            logger.warning("Ignoring unknown stored font %r", value)
            return self._default
        return value

    def save(self, font: str) -> str:
        """Persist `font`.

        Raises:
            ValueError: Unknown font.
        """

        if font not in FONTS:
            raise ValueError(f"Unknown font: {font}")
        self._store.set(self._key, font)
        return font
