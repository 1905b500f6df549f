"""
Theme Resolver — Theme → TokenSet.

Le TokenSet est le seul objet couleur que voient les renderers de blocs :
ils ne testent jamais theme.name, uniquement les valeurs des tokens.

resolve() est total : thème absent, partiel ou mal formé → chaque slot
invalide est remplacé par le slot de DEFAULT_THEME. Jamais d'exception,
jamais de token vide.
"""
import logging
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from ..core.schemas import Theme, ThemeColors
from .colors import is_valid_hex, rgb_string
from .presets import DEFAULT_THEME

log = logging.getLogger(__name__)

# alias persisté → nom de slot
_SLOT_ALIASES: Dict[str, str] = {
    (field.alias or name): name for name, field in ThemeColors.model_fields.items()
}


class TokenSet(BaseModel):
    """Jeu fixe de tokens couleur consommé par tous les renderers."""
    model_config = ConfigDict(frozen=True)

    bg_from: str
    bg_to: str
    accent: str
    accent_secondary: str
    text: str
    text_secondary: str
    card_bg: str
    card_border: str

    def css_variables(self) -> Dict[str, str]:
        """Custom properties CSS (--color-*) appliquées au conteneur du profil."""
        return {
            "--color-bg-from":          self.bg_from,
            "--color-bg-to":            self.bg_to,
            "--color-accent":           self.accent,
            "--color-accent-rgb":       rgb_string(self.accent),
            "--color-accent-secondary": self.accent_secondary,
            "--color-text":             self.text,
            "--color-text-secondary":   self.text_secondary,
            "--color-card-bg":          self.card_bg,
            "--color-card-border":      self.card_border,
        }

    def to_css(self, selector: str = ":root") -> str:
        lines = [f"  {k}: {v};" for k, v in self.css_variables().items()]
        return selector + " {\n" + "\n".join(lines) + "\n}"


ThemeLike = Union[Theme, Mapping[str, Any], None]


def _raw_colors(theme: ThemeLike) -> Dict[str, Any]:
    """Extrait les couleurs brutes {slot: valeur} quelle que soit la forme d'entrée."""
    if isinstance(theme, Theme):
        return theme.colors.model_dump()
    if isinstance(theme, Mapping):
        colors = theme.get("colors")
        if isinstance(colors, ThemeColors):
            return colors.model_dump()
        if isinstance(colors, Mapping):
            return {_SLOT_ALIASES.get(k, k): v for k, v in colors.items() if isinstance(k, str)}
    return {}


def _pick(raw: Dict[str, Any], slot: str, fallback: str) -> str:
    value = raw.get(slot)
    return value if is_valid_hex(value) else fallback


def _gradient(value: Any, fallback: Tuple[str, str]) -> Tuple[str, str]:
    if is_valid_hex(value):
        return value, fallback[1]
    if isinstance(value, (list, tuple)):
        start = value[0] if len(value) > 0 and is_valid_hex(value[0]) else fallback[0]
        end = value[1] if len(value) > 1 and is_valid_hex(value[1]) else fallback[1]
        return start, end
    return fallback


def resolve(theme: ThemeLike = None, fallback: Optional[Theme] = None) -> TokenSet:
    """
    Résout un thème en TokenSet.

    Args:
        theme:    Theme, dict brut (format persisté) ou None
        fallback: thème de repli (DEFAULT_THEME par défaut)
    """
    base = (fallback or DEFAULT_THEME).colors
    raw = _raw_colors(theme)

    bg_from, bg_to = _gradient(raw.get("bg_gradient"), base.bg_gradient)
    tokens = TokenSet(
        bg_from=bg_from,
        bg_to=bg_to,
        accent=_pick(raw, "accent", base.accent),
        accent_secondary=_pick(raw, "accent_secondary", base.accent_secondary),
        text=_pick(raw, "text", base.text),
        text_secondary=_pick(raw, "text_secondary", base.text_secondary),
        card_bg=_pick(raw, "card_bg", base.card_bg),
        card_border=_pick(raw, "card_border", base.card_border),
    )
    if theme is not None and not raw:
        log.debug("Thème sans couleurs exploitables, repli complet sur le défaut")
    return tokens
