"""
Drag-Reorder Controller — transforme un geste de glisser-déposer en UNE
mutation reorder sur le Composer.

États : IDLE → DRAGGING → (DROPPED | CANCELLED) → IDLE

  - start(id)    : saisie d'une poignée ; refusée si un drag est déjà actif
                   (un seul pointeur), si l'id est inconnu ou si c'est le header
  - hover(cible) : met à jour l'index proposé uniquement (feedback visuel,
                   le Composer n'est pas touché)
  - nudge(±1)    : même chose au clavier
  - drop(cible?) : calcule la permutation, appelle composer.reorder une fois ;
                   un drop qui déplacerait le header est ignoré silencieusement
  - cancel()     : touche Échap / perte de focus, aucun appel au Composer

Le renderer lit dragging_id (bloc à griser) et preview_order() (ordre transitoire).
"""
import logging
from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from .core.operations import array_move
from .core.validation import LayoutResult

log = logging.getLogger(__name__)


class DragState(str, Enum):
    IDLE      = "IDLE"
    DRAGGING  = "DRAGGING"
    DROPPED   = "DROPPED"
    CANCELLED = "CANCELLED"


_TRANSITIONS: Dict[str, List[str]] = {
    "IDLE":      ["DRAGGING"],
    "DRAGGING":  ["DROPPED", "CANCELLED"],
    "DROPPED":   ["IDLE"],
    "CANCELLED": ["IDLE"],
}


def can_transition(current: str, target: str) -> bool:
    return target in _TRANSITIONS.get(current, [])


class DropOutcome(BaseModel):
    """
    Issue d'un drop.

    reason : applied | unchanged | header_pinned | stale | rejected | not_dragging
    """
    model_config = ConfigDict(frozen=True)

    applied: bool
    reason: str
    order: List[str] = []
    result: Optional[LayoutResult] = None


DropTarget = Union[int, str, None]


class DragReorderController:

    def __init__(self, composer):
        # composer : tout objet exposant .document et .reorder(new_order)
        self._composer = composer
        self.state = DragState.IDLE
        self.dragging_id: Optional[str] = None
        self.origin_index: Optional[int] = None
        self.proposed_index: Optional[int] = None
        self._order_at_start: List[str] = []

    @property
    def is_dragging(self) -> bool:
        return self.state is DragState.DRAGGING

    def _transition(self, target: DragState) -> None:
        if not can_transition(self.state.value, target.value):
            raise RuntimeError(f"Transition drag {self.state.value} → {target.value} interdite")
        self.state = target

    def _reset(self) -> None:
        self.dragging_id = None
        self.origin_index = None
        self.proposed_index = None
        self._order_at_start = []
        self._transition(DragState.IDLE)

    # ── geste ────────────────────────────────────────────────────────────────

    def start(self, block_id: str) -> bool:
        """Début de drag. False si refusé (drag déjà actif, id inconnu, header)."""
        if self.state is not DragState.IDLE:
            log.debug("Drag %s ignoré : %s déjà en cours", block_id, self.dragging_id)
            return False
        doc = self._composer.document
        index = doc.index_of(block_id)
        if index is None or doc.blocks[index].is_header:
            return False

        self._transition(DragState.DRAGGING)
        self.dragging_id = block_id
        self.origin_index = index
        self.proposed_index = index
        self._order_at_start = doc.block_ids()
        return True

    def hover(self, target: DropTarget) -> Optional[int]:
        """Survol d'une cible (index ou id de bloc) ; renvoie l'index proposé."""
        if not self.is_dragging:
            return None
        index = self._target_index(target)
        if index is not None:
            self.proposed_index = index
        return self.proposed_index

    def nudge(self, step: int) -> Optional[int]:
        """Déplacement clavier (flèches) de l'index proposé, borné à la liste."""
        if not self.is_dragging:
            return None
        last = len(self._order_at_start) - 1
        self.proposed_index = max(0, min(last, self.proposed_index + step))
        return self.proposed_index

    def preview_order(self) -> List[str]:
        """Ordre transitoire affiché pendant le drag (ordre courant hors drag)."""
        if not self.is_dragging:
            return self._composer.document.block_ids()
        return array_move(self._order_at_start, self.origin_index, self.proposed_index)

    def drop(self, target: DropTarget = None) -> DropOutcome:
        if not self.is_dragging:
            return DropOutcome(applied=False, reason="not_dragging")
        if target is not None:
            self.hover(target)

        dragged, proposed = self.dragging_id, self.proposed_index
        self._transition(DragState.DROPPED)
        try:
            return self._commit_drop(dragged, proposed)
        finally:
            self._reset()

    def cancel(self) -> bool:
        """Annulation (Échap, perte de focus) : retour à l'ordre d'origine, aucune mutation."""
        if not self.is_dragging:
            return False
        log.debug("Drag %s annulé", self.dragging_id)
        self._transition(DragState.CANCELLED)
        self._reset()
        return True

    # ── interne ──────────────────────────────────────────────────────────────

    def _target_index(self, target: DropTarget) -> Optional[int]:
        if isinstance(target, bool):
            return None
        if isinstance(target, int):
            if not self._order_at_start:
                return None
            return max(0, min(len(self._order_at_start) - 1, target))
        if isinstance(target, str) and target in self._order_at_start:
            return self._order_at_start.index(target)
        return None

    def _commit_drop(self, dragged: str, proposed: int) -> DropOutcome:
        # ordre relu au drop : le document a pu changer pendant le drag
        doc = self._composer.document
        current = doc.block_ids()
        if dragged not in current:
            return DropOutcome(applied=False, reason="stale", order=current)

        new_order = array_move(current, current.index(dragged), min(proposed, len(current) - 1))
        if new_order == current:
            return DropOutcome(applied=False, reason="unchanged", order=current)

        header_ids = doc.header_ids()
        if header_ids and new_order[0] != header_ids[0]:
            log.debug("Drop de %s en %d ignoré : header épinglé", dragged, proposed)
            return DropOutcome(applied=False, reason="header_pinned", order=current)

        result = self._composer.reorder(new_order)
        if not result.ok:
            return DropOutcome(applied=False, reason="rejected", order=current, result=result)
        return DropOutcome(applied=True, reason="applied", order=new_order, result=result)
