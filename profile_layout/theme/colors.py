"""
Helpers couleurs hex — validation syntaxique + conversions.
Aucune validation sémantique (contraste…) : c'est un sujet produit.
"""
import re
from typing import Any, Tuple

# #RRGGBB ou #RRGGBBAA (les presets portent de l'alpha sur les cards)
HEX_COLOR_RE = re.compile(r"^#(?:[0-9A-Fa-f]{6}|[0-9A-Fa-f]{8})$")


def is_valid_hex(value: Any) -> bool:
    return isinstance(value, str) and HEX_COLOR_RE.match(value) is not None


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convertit #RRGGBB (ou #RRGGBBAA, alpha ignoré) en (R, G, B)."""
    hex_color = hex_color.lstrip("#")
    return tuple(int(hex_color[i:i + 2], 16) for i in (0, 2, 4))


def rgb_string(hex_color: str) -> str:
    """#39ff14 → "57, 255, 20" (pour rgba() côté CSS)."""
    r, g, b = hex_to_rgb(hex_color)
    return f"{r}, {g}, {b}"
