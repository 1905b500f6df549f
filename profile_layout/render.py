"""
Passage au renderer : document committé → plan de rendu.

Le renderer reçoit, par bloc, {id, type, variant, config} + le TokenSet
complet. Un type inconnu est marqué known=False : le renderer affiche son
bloc générique au lieu de planter la page.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .blocks.registry import find_type
from .core.schemas import LayoutDocument
from .theme.resolver import TokenSet, resolve


class RenderBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    variant: Optional[str] = None
    config: Dict[str, Any] = Field(default_factory=dict)
    known: bool = True


class RenderPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner_id: str
    blocks: List[RenderBlock]
    tokens: TokenSet

    def css_variables(self) -> Dict[str, str]:
        return self.tokens.css_variables()


def build_render_plan(doc: LayoutDocument) -> RenderPlan:
    blocks: List[RenderBlock] = []
    for b in doc.blocks:
        descriptor = find_type(b.type)
        if descriptor is None:
            blocks.append(RenderBlock(id=b.id, type=b.type, variant=b.variant, config=b.config, known=False))
            continue
        variant = b.variant if descriptor.get_variant(b.variant or "") else descriptor.default_variant
        blocks.append(RenderBlock(id=b.id, type=descriptor.type, variant=variant, config=b.config))
    return RenderPlan(owner_id=doc.owner_id, blocks=blocks, tokens=resolve(doc.theme))
