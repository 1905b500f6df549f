"""
ORM — table profile_layout (SQLAlchemy, SQLite par défaut).
Blocs et thème stockés en JSON texte, au format persisté historique.
"""
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class ProfileLayoutDB(Base):
    __tablename__ = "profile_layout"
    profile_id: Mapped[str]      = mapped_column(sa.String, primary_key=True)
    blocks:     Mapped[str]      = mapped_column(sa.Text, nullable=False, default="[]")
    theme:      Mapped[str]      = mapped_column(sa.Text, nullable=False, default="{}")
    updated_at: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), default=_utcnow)
