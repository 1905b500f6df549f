"""
Schémas Pydantic du layout de profil.
Structure : LayoutDocument → Block[] (ordonnés) + Theme → ThemeColors

Les modèles sont figés : toute modification passe par core/operations.py,
qui renvoie un nouveau document (l'ancien reste intact).

Format persisté (compat historique) :
  - document : profile_id, blocks, theme, updated_at
  - couleurs : bgGradient, accent, accentSecondary, text, textSecondary, cardBg, cardBorder
Les deux écritures (camelCase / snake_case) sont acceptées en entrée.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..blocks.registry import HEADER_TYPE

# Slots de couleur, dans l'ordre d'affichage
COLOR_SLOTS: Tuple[str, ...] = (
    "bg_gradient",
    "accent",
    "accent_secondary",
    "text",
    "text_secondary",
    "card_bg",
    "card_border",
)


class ThemeColors(BaseModel):
    """Palette d'un thème. Valeurs par défaut = preset neonBlue."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    bg_gradient:      Tuple[str, str] = Field(default=("#0f172a", "#1e293b"), alias="bgGradient")
    accent:           str = "#3b82f6"
    accent_secondary: str = Field(default="#1d4ed8", alias="accentSecondary")
    text:             str = "#ffffff"
    text_secondary:   str = Field(default="#94a3b8", alias="textSecondary")
    card_bg:          str = Field(default="#1e293b80", alias="cardBg")
    card_border:      str = Field(default="#37415150", alias="cardBorder")


class Theme(BaseModel):
    """Thème de la page : nom de preset ou "custom" + palette."""
    model_config = ConfigDict(frozen=True)

    name: str = "neonBlue"
    colors: ThemeColors = Field(default_factory=ThemeColors)


class Block(BaseModel):
    """Un module placé sur le profil. `config` est opaque pour le moteur."""
    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    variant: Optional[str] = None
    config: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("config", mode="before")
    @classmethod
    def _config_none_as_empty(cls, v):
        return {} if v is None else v

    @property
    def is_header(self) -> bool:
        return self.type == HEADER_TYPE


class LayoutDocument(BaseModel):
    """Unité éditée/persistée pour un profil."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    owner_id: str = Field(..., alias="profile_id")
    blocks: List[Block] = Field(default_factory=list)
    theme: Theme = Field(default_factory=Theme)
    updated_at: Optional[datetime] = None  # posé par le store, affichage/debug uniquement

    def block_ids(self) -> List[str]:
        return [b.id for b in self.blocks]

    def index_of(self, block_id: str) -> Optional[int]:
        for i, b in enumerate(self.blocks):
            if b.id == block_id:
                return i
        return None

    def get_block(self, block_id: str) -> Optional[Block]:
        i = self.index_of(block_id)
        return None if i is None else self.blocks[i]

    def header_ids(self) -> List[str]:
        return [b.id for b in self.blocks if b.is_header]

    def to_storage(self) -> Dict[str, Any]:
        """Dict JSON-sérialisable au format persisté."""
        return self.model_dump(mode="json", by_alias=True)

    def content_equals(self, other: "LayoutDocument") -> bool:
        """Égalité structurelle hors updated_at."""
        return (
            self.owner_id == other.owner_id
            and self.blocks == other.blocks
            and self.theme == other.theme
        )
