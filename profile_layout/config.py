"""
Configuration — variables d'environnement.

  PROFILE_LAYOUT_DB_PATH        fichier SQLite du store (défaut : data/profile_layout.db)
  PROFILE_LAYOUT_LOG_LEVEL      niveau de log de l'app FastAPI (défaut : INFO)
  PROFILE_LAYOUT_DEFAULT_THEME  preset appliqué aux nouveaux layouts (défaut : neonBlue)

Lues à chaque appel : les tests peuvent changer l'env sans recharger le module.
"""
import os
from pathlib import Path

DATA_DIR = Path(__file__).parent.parent / "data"


def db_path() -> str:
    return os.getenv("PROFILE_LAYOUT_DB_PATH", str(DATA_DIR / "profile_layout.db"))


def log_level() -> str:
    return os.getenv("PROFILE_LAYOUT_LOG_LEVEL", "INFO").upper()


def default_theme_name() -> str:
    return os.getenv("PROFILE_LAYOUT_DEFAULT_THEME", "neonBlue")
