"""SQLite — engine + session + helpers JSON"""
import json
import logging
from pathlib import Path
from typing import Any, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from .config import db_path
from .models import Base

log = logging.getLogger(__name__)

_session_factory: Optional[sessionmaker] = None


def make_session_factory(path: Optional[str] = None) -> sessionmaker:
    """Crée engine + sessionmaker pour un fichier SQLite (tables créées si absentes)."""
    path = path or db_path()
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{path}", connect_args={"check_same_thread": False})
    init_db(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine) -> None:
    Base.metadata.create_all(bind=engine)
    log.info("Tables layout initialisées (%s)", engine.url)


def get_session_factory() -> sessionmaker:
    """Factory partagée de l'app, créée au premier appel."""
    global _session_factory
    if _session_factory is None:
        _session_factory = make_session_factory()
    return _session_factory


def reset_session_factory() -> None:
    """Oublie la factory partagée (changement de PROFILE_LAYOUT_DB_PATH, tests)."""
    global _session_factory
    if _session_factory is not None:
        _session_factory.kw["bind"].dispose()
    _session_factory = None


# ── JSON helpers ──
def jd(o: Any) -> str:
    return json.dumps(o, ensure_ascii=False)


def jl(s: Optional[str], default: Any) -> Any:
    """json.loads tolérant au vide ; une chaîne invalide lève json.JSONDecodeError."""
    return json.loads(s) if s else default
