"""
Routes layouts de profil.

GET  /api/layouts/catalog            → types de blocs + variants
GET  /api/layouts/themes             → presets de thèmes
GET  /api/layouts/{owner_id}         → layout (créé par défaut si absent)
PUT  /api/layouts/{owner_id}         → remplace blocs / thème puis sauvegarde
GET  /api/layouts/{owner_id}/render  → plan de rendu (blocs + tokens)

L'autorisation (l'appelant peut-il éditer ce profil ?) est faite en amont.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ...blocks.registry import list_types
from ...composer import LayoutComposer
from ...errors import CommitRejected, StoreError
from ...render import build_render_plan
from ...store.base import LayoutStore
from ...store.sql import SqlLayoutStore
from ...theme.presets import DEFAULT_THEME_ID, THEME_PRESETS

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/layouts", tags=["layouts"])


class LayoutUpdateRequest(BaseModel):
    blocks: List[Dict[str, Any]]
    theme: Optional[Dict[str, Any]] = None


def get_store() -> LayoutStore:
    return SqlLayoutStore()


def _issues_detail(issues) -> List[dict]:
    return [i.model_dump(mode="json") for i in issues]


async def _open(owner_id: str, store: LayoutStore) -> LayoutComposer:
    composer = LayoutComposer(store, owner_id)
    try:
        await composer.load()
    except StoreError as e:
        raise HTTPException(503, f"Store indisponible : {e}")
    return composer


# ── Catalogue ─────────────────────────────────────────────────────────────────

@router.get("/catalog")
def catalog():
    return {"blocks": [t.model_dump() for t in list_types()]}


@router.get("/themes")
def themes():
    return {
        "default": DEFAULT_THEME_ID,
        "themes": [p.model_dump(by_alias=True) for p in THEME_PRESETS],
    }


# ── Layout d'un profil ────────────────────────────────────────────────────────

@router.get("/{owner_id}")
async def get_layout(owner_id: str, store: LayoutStore = Depends(get_store)):
    composer = await _open(owner_id, store)
    return composer.document.to_storage()


@router.put("/{owner_id}")
async def put_layout(owner_id: str, body: LayoutUpdateRequest, store: LayoutStore = Depends(get_store)):
    composer = await _open(owner_id, store)
    result = composer.replace_content(body.blocks, body.theme)
    if not result.ok:
        raise HTTPException(422, {"errors": _issues_detail(result.errors)})
    try:
        await composer.commit()
    except CommitRejected as e:
        raise HTTPException(422, {"errors": _issues_detail(e.issues)})
    except StoreError as e:
        raise HTTPException(503, f"Store indisponible : {e}")
    log.info("Layout %s mis à jour via API", owner_id)
    return composer.document.to_storage()


@router.get("/{owner_id}/render")
async def render_layout(owner_id: str, store: LayoutStore = Depends(get_store)):
    composer = await _open(owner_id, store)
    plan = build_render_plan(composer.document)
    return {
        "profile_id": plan.owner_id,
        "blocks": [b.model_dump() for b in plan.blocks],
        "tokens": plan.tokens.model_dump(),
        "css_variables": plan.css_variables(),
    }
