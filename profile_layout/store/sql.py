"""
Store SQLAlchemy — une ligne profile_layout par owner (upsert, dernier save gagnant).

Les sessions SQLAlchemy sont synchrones : le travail est déporté dans un
thread (asyncio.to_thread) pour ne pas bloquer la boucle du Composer.
"""
import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..core.schemas import LayoutDocument
from ..database import get_session_factory, jd, jl
from ..errors import StoreError
from ..models import ProfileLayoutDB
from .base import LayoutStore, SaveReceipt

log = logging.getLogger(__name__)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite rend des datetimes naïfs
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlLayoutStore(LayoutStore):

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory or get_session_factory()

    async def load(self, owner_id: str) -> Optional[LayoutDocument]:
        return await asyncio.to_thread(self._load_sync, owner_id)

    async def save(self, doc: LayoutDocument) -> SaveReceipt:
        return await asyncio.to_thread(self._save_sync, doc)

    # ── sync ──

    def _load_sync(self, owner_id: str) -> Optional[LayoutDocument]:
        try:
            with self._session_factory() as db:
                row = db.get(ProfileLayoutDB, owner_id)
                if row is None:
                    return None
                payload = {
                    "profile_id": row.profile_id,
                    "blocks": jl(row.blocks, []),
                    "theme": jl(row.theme, {}),
                    "updated_at": _as_utc(row.updated_at),
                }
        except SQLAlchemyError as e:
            log.error("Lecture layout %s : %s", owner_id, e)
            raise StoreError(f"Lecture du layout impossible : {e}", owner_id=owner_id) from e
        except json.JSONDecodeError as e:
            log.error("Layout %s : JSON illisible (%s)", owner_id, e)
            raise StoreError("Layout persisté illisible (JSON)", owner_id=owner_id) from e

        try:
            return LayoutDocument.model_validate(payload)
        except ValidationError as e:
            log.error("Layout %s : format inattendu (%d erreurs)", owner_id, e.error_count())
            raise StoreError("Layout persisté au format inattendu", owner_id=owner_id) from e

    def _save_sync(self, doc: LayoutDocument) -> SaveReceipt:
        data = doc.to_storage()
        updated_at = datetime.now(timezone.utc)
        try:
            with self._session_factory() as db:
                db.merge(ProfileLayoutDB(
                    profile_id=doc.owner_id,
                    blocks=jd(data["blocks"]),
                    theme=jd(data["theme"]),
                    updated_at=updated_at,
                ))
                db.commit()
        except SQLAlchemyError as e:
            log.error("Sauvegarde layout %s : %s", doc.owner_id, e)
            raise StoreError(f"Sauvegarde du layout impossible : {e}", owner_id=doc.owner_id) from e
        log.info("Layout %s sauvegardé (%d blocs)", doc.owner_id, len(doc.blocks))
        return SaveReceipt(owner_id=doc.owner_id, updated_at=updated_at)
