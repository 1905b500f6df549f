"""
Store en mémoire — tests et dev local.
Peut simuler des pannes (fail_next_load / fail_next_save) pour exercer les
chemins d'erreur du Composer.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ..core.schemas import LayoutDocument
from ..errors import StoreError
from .base import LayoutStore, SaveReceipt

log = logging.getLogger(__name__)


class InMemoryLayoutStore(LayoutStore):

    def __init__(self, documents: Optional[Dict[str, LayoutDocument]] = None):
        self._documents: Dict[str, LayoutDocument] = dict(documents or {})
        self.load_calls: List[str] = []
        self.save_calls: List[LayoutDocument] = []
        self._load_failures = 0
        self._save_failures = 0

    # ── simulation de pannes ──

    def fail_next_load(self, times: int = 1) -> None:
        self._load_failures += times

    def fail_next_save(self, times: int = 1) -> None:
        self._save_failures += times

    # ── LayoutStore ──

    async def load(self, owner_id: str) -> Optional[LayoutDocument]:
        self.load_calls.append(owner_id)
        if self._load_failures:
            self._load_failures -= 1
            raise StoreError("Store indisponible (load simulé)", owner_id=owner_id)
        doc = self._documents.get(owner_id)
        return doc.model_copy(deep=True) if doc else None

    async def save(self, doc: LayoutDocument) -> SaveReceipt:
        self.save_calls.append(doc)
        if self._save_failures:
            self._save_failures -= 1
            raise StoreError("Store indisponible (save simulé)", owner_id=doc.owner_id)
        updated_at = datetime.now(timezone.utc)
        self._documents[doc.owner_id] = doc.model_copy(update={"updated_at": updated_at}, deep=True)
        log.debug("Layout %s sauvegardé en mémoire (%d blocs)", doc.owner_id, len(doc.blocks))
        return SaveReceipt(owner_id=doc.owner_id, updated_at=updated_at)

    def get(self, owner_id: str) -> Optional[LayoutDocument]:
        """Accès direct (assertions de test)."""
        return self._documents.get(owner_id)
