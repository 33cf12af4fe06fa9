from __future__ import annotations
"""
server/app/infrastructure/persistence/database/base.py

Base ORM SQLAlchemy 2.x des tables de télémétrie (iot_data, alerts,
buzzer_control).

L'import du package `models` en bas de module enregistre ces tables sur
Base.metadata : `create_schema()` et la DB SQLite des tests s'appuient dessus.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


# enregistrement des tables
from app.infrastructure.persistence.database.models import *  # noqa: F403,F401,E402

__all__ = ["Base"]
