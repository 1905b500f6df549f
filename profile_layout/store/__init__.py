"""Stores de layouts — interface + implémentations mémoire / SQLAlchemy."""
from .base import LayoutStore, SaveReceipt
from .memory import InMemoryLayoutStore
from .sql import SqlLayoutStore

__all__ = ["LayoutStore", "SaveReceipt", "InMemoryLayoutStore", "SqlLayoutStore"]
