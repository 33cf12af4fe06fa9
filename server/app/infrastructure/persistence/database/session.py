# server/app/infrastructure/persistence/database/session.py
from __future__ import annotations

"""Engine et sessions SQLAlchemy (singletons paresseux, config via settings)."""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings

_engine: Engine | None = None
_SessionLocal: sessionmaker | None = None


def init_engine() -> Engine:
    """
    Engine unique, connect_args selon le dialecte :
    - PostgreSQL : connect_timeout (DB_CONNECT_TIMEOUT)
    - SQLite in-memory : StaticPool, une seule base vue par toutes les connexions
    """
    global _engine
    if _engine is not None:
        return _engine

    url = make_url(settings.DATABASE_URL)
    backend = url.get_backend_name()
    kwargs: dict = dict(future=True, pool_pre_ping=True)
    connect_args: dict = {}

    if backend.startswith("postgresql") or backend == "postgres":
        connect_args["connect_timeout"] = int(settings.DB_CONNECT_TIMEOUT)
    elif backend.startswith("sqlite"):
        connect_args["check_same_thread"] = False
        db_name = (url.database or "").strip()
        if db_name in ("", ":memory:"):
            kwargs["poolclass"] = StaticPool

    _engine = create_engine(settings.DATABASE_URL, connect_args=connect_args, **kwargs)
    return _engine


def init_sessionmaker() -> sessionmaker:
    """Fabrique de sessions, créée au premier appel."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            bind=init_engine(),
            future=True,
            autoflush=True,
            expire_on_commit=False,
        )
    return _SessionLocal


def get_session() -> Session:
    """Nouvelle session ; à fermer par l'appelant."""
    return init_sessionmaker()()


@contextmanager
def get_sync_session() -> Iterator[Session]:
    """Session courte fermée en sortie : `with get_sync_session() as s:`."""
    s = get_session()
    try:
        yield s
    finally:
        s.close()


def create_schema() -> None:
    """Crée les tables manquantes (dev / SQLite ; en prod le schéma est provisionné)."""
    from app.infrastructure.persistence.database.base import Base

    Base.metadata.create_all(bind=init_engine())
