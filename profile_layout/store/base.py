"""
Layout Store — contrat de persistance utilisé par le Composer.

Le moteur ne dépend que de cette interface. Pas de verrou ni de version :
le dernier save() gagne (pas de détection de conflit entre deux éditeurs).
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..core.schemas import LayoutDocument


class SaveReceipt(BaseModel):
    """Accusé de sauvegarde : updated_at est posé par le store."""
    model_config = ConfigDict(frozen=True)

    owner_id: str
    updated_at: datetime


class LayoutStore(ABC):
    """Interface du store de layouts (load/save par owner_id)."""

    @abstractmethod
    async def load(self, owner_id: str) -> Optional[LayoutDocument]:
        """Layout persisté de l'owner, ou None s'il n'existe pas.

        Raises:
            StoreError: store indisponible ou données illisibles.
        """
        raise NotImplementedError

    @abstractmethod
    async def save(self, doc: LayoutDocument) -> SaveReceipt:
        """Écrase le layout de doc.owner_id (upsert).

        Raises:
            StoreError: échec d'écriture.
        """
        raise NotImplementedError
