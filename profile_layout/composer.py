"""
Layout Composer — contrôleur d'une session d'édition.

Une instance par session, créée par l'appelant (pas d'état global) :
    >>> composer = LayoutComposer(store, owner_id)
    >>> await composer.load()
    >>> composer.add_block("gallery")
    >>> await composer.commit()

États : UNINITIALIZED → LOADING → READY ⇄ SAVING, LOADING → ERROR → LOADING (retry).

Seuls load() et commit() suspendent (I/O store). Les mutations sont
synchrones, appliquées dans l'ordre d'appel sur la copie de travail.
Un commit capture la copie de travail au moment de l'appel : les mutations
faites pendant la sauvegarde partent au commit suivant.
"""
import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .core.operations import (
    default_layout,
    normalize_document,
    with_block_added,
    with_block_moved,
    with_block_removed,
    with_blocks_reordered,
    with_config_set,
    with_content_replaced,
    with_theme_set,
    with_variant_set,
)
from .core.schemas import Block, LayoutDocument, Theme
from .core.validation import LayoutResult, ValidationIssue, validate
from .errors import CommitRejected, ComposerStateError
from .store.base import LayoutStore, SaveReceipt

log = logging.getLogger(__name__)


class ComposerState(str, Enum):
    UNINITIALIZED = "UNINITIALIZED"
    LOADING       = "LOADING"
    READY         = "READY"
    SAVING        = "SAVING"
    ERROR         = "ERROR"


_TRANSITIONS: Dict[str, List[str]] = {
    "UNINITIALIZED": ["LOADING"],
    "LOADING":       ["READY", "ERROR"],
    "READY":         ["SAVING"],
    "SAVING":        ["READY"],
    "ERROR":         ["LOADING"],
}


def can_transition(current: str, target: str) -> bool:
    return target in _TRANSITIONS.get(current, [])


# mutations autorisées pendant un commit en vol (elles iront au commit suivant)
_EDITABLE = (ComposerState.READY, ComposerState.SAVING)


class LayoutComposer:

    def __init__(self, store: LayoutStore, owner_id: str):
        self._store = store
        self.owner_id = owner_id
        self.state = ComposerState.UNINITIALIZED
        self._working: Optional[LayoutDocument] = None
        self._committed: Optional[LayoutDocument] = None
        self.updated_at: Optional[datetime] = None
        self.last_error: Optional[Exception] = None
        self.last_issues: List[ValidationIssue] = []

    # ── état ─────────────────────────────────────────────────────────────────

    def _transition(self, target: ComposerState) -> None:
        if not can_transition(self.state.value, target.value):
            raise ComposerStateError(f"Transition {self.state.value} → {target.value} interdite")
        log.debug("Composer %s : %s → %s", self.owner_id, self.state.value, target.value)
        self.state = target

    def _require_editable(self) -> LayoutDocument:
        if self.state not in _EDITABLE or self._working is None:
            raise ComposerStateError(f"Layout non chargé (état {self.state.value})")
        return self._working

    @property
    def document(self) -> LayoutDocument:
        """Copie de travail courante."""
        return self._require_editable()

    @property
    def committed(self) -> Optional[LayoutDocument]:
        """Dernier document chargé ou sauvegardé avec succès."""
        return self._committed

    @property
    def is_dirty(self) -> bool:
        if self._working is None or self._committed is None:
            return False
        return not self._working.content_equals(self._committed)

    # ── chargement ───────────────────────────────────────────────────────────

    async def load(self) -> LayoutDocument:
        """
        Charge le layout de l'owner. S'il n'existe pas, le layout par défaut est
        créé puis sauvegardé (une seule fois) avant de passer READY.

        Raises:
            StoreError: le Composer passe en ERROR ; rappeler load() pour réessayer.
        """
        self._transition(ComposerState.LOADING)
        try:
            doc = await self._store.load(self.owner_id)
            if doc is None:
                doc = default_layout(self.owner_id)
                receipt = await self._store.save(doc)
                doc = doc.model_copy(update={"updated_at": receipt.updated_at})
                log.info("Layout par défaut créé pour %s", self.owner_id)
            else:
                doc = normalize_document(doc)
        except Exception as e:
            self.last_error = e
            self._transition(ComposerState.ERROR)
            log.error("Chargement layout %s : %s", self.owner_id, e)
            raise

        self._working = self._committed = doc
        self.updated_at = doc.updated_at
        self.last_error = None
        self._transition(ComposerState.READY)
        return doc

    # ── mutations ────────────────────────────────────────────────────────────

    def _apply(self, result: LayoutResult) -> LayoutResult:
        if result.ok:
            self._working = result.document
        else:
            self.last_issues = list(result.errors)
            log.info("Layout %s : mutation refusée (%s)", self.owner_id,
                     ", ".join(i.code.value for i in result.errors))
        return result

    def add_block(self, block_type: str, variant: Optional[str] = None,
                  config: Optional[Mapping[str, Any]] = None) -> LayoutResult:
        return self._apply(with_block_added(self._require_editable(), block_type, variant, config))

    def remove_block(self, block_id: str) -> LayoutResult:
        return self._apply(with_block_removed(self._require_editable(), block_id))

    def reorder(self, new_order: Sequence[str]) -> LayoutResult:
        return self._apply(with_blocks_reordered(self._require_editable(), new_order))

    def move_block(self, block_id: str, to_index: int) -> LayoutResult:
        return self._apply(with_block_moved(self._require_editable(), block_id, to_index))

    def set_variant(self, block_id: str, variant: str) -> LayoutResult:
        return self._apply(with_variant_set(self._require_editable(), block_id, variant))

    def set_config(self, block_id: str, config: Mapping[str, Any]) -> LayoutResult:
        return self._apply(with_config_set(self._require_editable(), block_id, config))

    def set_theme(self, theme: Union[Theme, Mapping[str, Any]]) -> LayoutResult:
        return self._apply(with_theme_set(self._require_editable(), theme))

    def replace_content(self, blocks: Sequence[Union[Block, Mapping[str, Any]]],
                        theme: Optional[Union[Theme, Mapping[str, Any]]] = None) -> LayoutResult:
        """Remplace blocs (+ thème) en une fois ; tout ou rien."""
        return self._apply(with_content_replaced(self._require_editable(), blocks, theme))

    def reset_to_default(self) -> LayoutResult:
        """Revient au layout et au thème par défaut (à committer ensuite)."""
        current = self._require_editable()
        fresh = default_layout(self.owner_id)
        return self._apply(LayoutResult(
            document=current.model_copy(update={"blocks": fresh.blocks, "theme": fresh.theme}),
        ))

    # ── sauvegarde ───────────────────────────────────────────────────────────

    async def commit(self) -> SaveReceipt:
        """
        Valide puis sauvegarde la copie de travail telle qu'à l'appel.

        Raises:
            CommitRejected:     document invalide (rien n'est envoyé au store)
            StoreError:         échec du store ; la copie de travail est conservée,
                                un nouveau commit() suffit pour réessayer
            ComposerStateError: pas READY (non chargé, ou commit déjà en vol)
        """
        if self.state is not ComposerState.READY or self._working is None:
            raise ComposerStateError(f"Commit impossible dans l'état {self.state.value}")

        snapshot = self._working
        self._transition(ComposerState.SAVING)
        try:
            issues = validate(snapshot)
            if issues:
                self.last_issues = issues
                raise CommitRejected(issues)
            receipt = await self._store.save(snapshot)
        except CommitRejected:
            log.info("Layout %s : commit refusé (%d problème(s))", self.owner_id, len(self.last_issues))
            raise
        except Exception as e:
            self.last_error = e
            log.error("Sauvegarde layout %s : %s", self.owner_id, e)
            raise
        else:
            self._record_commit(snapshot, receipt)
            return receipt
        finally:
            if self.state is ComposerState.SAVING:
                self._transition(ComposerState.READY)

    def _record_commit(self, snapshot: LayoutDocument, receipt: SaveReceipt) -> None:
        self._committed = snapshot.model_copy(update={"updated_at": receipt.updated_at})
        if self._working is snapshot:
            self._working = self._committed
        else:
            # mutations arrivées pendant la sauvegarde : conservées pour le prochain commit
            self._working = self._working.model_copy(update={"updated_at": receipt.updated_at})
        self.updated_at = receipt.updated_at
        self.last_error = None
        self.last_issues = []
        log.info("Layout %s committé (%d blocs)", self.owner_id, len(snapshot.blocks))
