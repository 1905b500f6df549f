"""Thèmes — couleurs hex, presets, resolver Theme → TokenSet."""
# colors en premier : core.validation en dépend pendant l'import de presets
from .colors import HEX_COLOR_RE, is_valid_hex, hex_to_rgb, rgb_string
from .presets import (
    CUSTOM_THEME_NAME,
    DEFAULT_THEME_ID,
    DEFAULT_THEME,
    THEME_PRESETS,
    ThemePreset,
    get_preset,
    get_theme_by_name,
    create_custom_theme,
    create_theme,
)
from .resolver import TokenSet, resolve

__all__ = [
    "HEX_COLOR_RE", "is_valid_hex", "hex_to_rgb", "rgb_string",
    "CUSTOM_THEME_NAME", "DEFAULT_THEME_ID", "DEFAULT_THEME", "THEME_PRESETS",
    "ThemePreset", "get_preset", "get_theme_by_name",
    "create_custom_theme", "create_theme",
    "TokenSet", "resolve",
]
