"""
Presets de thèmes — palettes prêtes à l'emploi.

DEFAULT_THEME est aussi la palette de repli du resolver : chaque slot absent
ou invalide d'un thème est remplacé par le slot correspondant ici.
"""
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from ..core.schemas import Theme, ThemeColors

CUSTOM_THEME_NAME = "custom"
DEFAULT_THEME_ID = "neonBlue"


class ThemePreset(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    colors: ThemeColors

    def to_theme(self) -> Theme:
        return Theme(name=self.id, colors=self.colors)


def _preset(id: str, name: str, description: str, **colors) -> ThemePreset:
    return ThemePreset(id=id, name=name, description=description, colors=ThemeColors(**colors))


THEME_PRESETS: List[ThemePreset] = [
    _preset(
        "neonBlue", "Neon Blue", "Electric blue with dark gradients",
        bgGradient=("#0f172a", "#1e293b"), accent="#3b82f6", accentSecondary="#1d4ed8",
        text="#ffffff", textSecondary="#94a3b8", cardBg="#1e293b80", cardBorder="#37415150",
    ),
    _preset(
        "neonGreen", "Neon Green", "Matrix-style green on black",
        bgGradient=("#0c0c0c", "#1a1a1a"), accent="#39ff14", accentSecondary="#00ff00",
        text="#ffffff", textSecondary="#a3a3a3", cardBg="#1a1a1a80", cardBorder="#39ff1430",
    ),
    _preset(
        "cyberPurple", "Cyber Purple", "Futuristic purple and pink",
        bgGradient=("#1a0033", "#2d1b4e"), accent="#a855f7", accentSecondary="#ec4899",
        text="#ffffff", textSecondary="#c4b5fd", cardBg="#2d1b4e80", cardBorder="#a855f730",
    ),
    _preset(
        "retroPink", "Retro Pink", "Synthwave pink and orange",
        bgGradient=("#1a0d1a", "#330a2e"), accent="#ff1493", accentSecondary="#ff6b35",
        text="#ffffff", textSecondary="#ffb3d9", cardBg="#330a2e80", cardBorder="#ff149330",
    ),
    _preset(
        "neonOrange", "Neon Orange", "Vibrant orange energy",
        bgGradient=("#1a0f00", "#331a00"), accent="#ff6600", accentSecondary="#ff4500",
        text="#ffffff", textSecondary="#ffcc99", cardBg="#331a0080", cardBorder="#ff660030",
    ),
    _preset(
        "iceBlue", "Ice Blue", "Cool arctic blues",
        bgGradient=("#0a0e1a", "#1a2233"), accent="#00bfff", accentSecondary="#1e90ff",
        text="#ffffff", textSecondary="#b3e5ff", cardBg="#1a223380", cardBorder="#00bfff30",
    ),
]

_PRESETS_BY_ID: Dict[str, ThemePreset] = {p.id: p for p in THEME_PRESETS}

DEFAULT_THEME: Theme = _PRESETS_BY_ID[DEFAULT_THEME_ID].to_theme()


def get_preset(preset_id: str) -> Optional[ThemePreset]:
    return _PRESETS_BY_ID.get(preset_id)


def get_theme_by_name(name: Optional[str]) -> Theme:
    """Thème d'un preset ; DEFAULT_THEME si le nom est inconnu."""
    preset = _PRESETS_BY_ID.get(name or "")
    return preset.to_theme() if preset else DEFAULT_THEME


def create_custom_theme(colors: Mapping[str, object]) -> Theme:
    """
    Thème "custom" à partir d'une palette partielle : les slots non fournis
    viennent de DEFAULT_THEME. Les clés camelCase et snake_case sont acceptées.
    """
    base = DEFAULT_THEME.colors.model_dump()
    merged = {**base, **dict(colors)}
    return Theme(name=CUSTOM_THEME_NAME, colors=ThemeColors.model_validate(_dedupe_keys(merged, colors)))


def create_theme(colors: ThemeColors) -> Theme:
    return Theme(name=CUSTOM_THEME_NAME, colors=colors)


def _dedupe_keys(merged: dict, override: Mapping[str, object]) -> dict:
    """Retire la clé snake_case par défaut quand l'appelant fournit l'alias camelCase."""
    out = dict(merged)
    for name, field in ThemeColors.model_fields.items():
        if field.alias and field.alias in override:
            out.pop(name, None)
    return out
