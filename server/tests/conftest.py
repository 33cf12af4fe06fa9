# server/tests/conftest.py
"""
Conftest *global* pour toute la suite de tests.

Points clés (tests @unit uniquement) :
- ENV sûres (pas d'appels externes) + DATABASE_URL SQLite in-memory.
- Celery en mode "eager" (exécution in-process, pas de broker).
- DB SQLite in-memory partagée + Base.metadata.create_all.
- Patch de get_sync_session (module session) vers cette DB : les stores SQL
  le résolvent à l'appel, ils visent donc SQLite pendant les tests.
- Purge des tables après chaque test.
"""

import importlib
import os
from contextlib import contextmanager

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


# ============================================================================
# Helpers
# ============================================================================
def _is_unit(request: pytest.FixtureRequest) -> bool:
    """True si le test courant est marqué @pytest.mark.unit."""
    return request.node.get_closest_marker("unit") is not None


# ============================================================================
# UNIT-ONLY: ENV sûres
# ============================================================================
@pytest.fixture(autouse=True)
def unit_env(request):
    """
    En unit : DATABASE_URL SQLite in-memory si non fournie, au cas où le code
    lit directement l'ENV (avant nos patchs). Hors unit : ne fait rien.
    """
    if not _is_unit(request):
        return
    os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")


# ============================================================================
# UNIT-ONLY: Celery en mode "eager" (tâches exécutées in-process)
# ============================================================================
@pytest.fixture(autouse=True)
def celery_eager(request):
    """
    Active le mode 'eager' de Celery en unit.
    ⚠️ Fixture générateur : doit toujours 'yield', même hors unit.
    """
    if not _is_unit(request):
        yield
        return

    from app.workers.celery_app import celery

    prev_always = celery.conf.task_always_eager
    prev_propag = celery.conf.task_eager_propagates
    celery.conf.task_always_eager = True
    celery.conf.task_eager_propagates = True
    try:
        yield
    finally:
        celery.conf.task_always_eager = prev_always
        celery.conf.task_eager_propagates = prev_propag


# ============================================================================
# UNIT-ONLY: DB SQLite in-memory partagée + Base.metadata.create_all
# ============================================================================
@pytest.fixture(scope="session")
def _sqlite_engine_unit():
    """Engine in-memory **partagé** entre connexions (StaticPool + check_same_thread=False)."""
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    from app.infrastructure.persistence.database import base as db_base

    db_base.Base.metadata.create_all(engine)
    return engine


@pytest.fixture(scope="session")
def _Session_unit(_sqlite_engine_unit):
    return sessionmaker(
        bind=_sqlite_engine_unit,
        future=True,
        autoflush=True,
        expire_on_commit=False,
    )


@pytest.fixture
def Session(request, _Session_unit):
    """
    sessionmaker SQLite à utiliser comme `with Session() as s:`.
    Skippé hors @unit (sécurité d'usage).
    """
    if not _is_unit(request):
        pytest.skip("Session fixture is only available for unit tests")
    return _Session_unit


@pytest.fixture(autouse=True)
def _clear_db_between_unit_tests(request, _Session_unit):
    """Après chaque test unitaire, on vide toutes les tables."""
    if not _is_unit(request):
        yield
        return

    yield
    from app.infrastructure.persistence.database import base as db_base
    with _Session_unit() as s:
        for table in reversed(db_base.Base.metadata.sorted_tables):
            s.execute(table.delete())
        s.commit()


# ============================================================================
# UNIT-ONLY: get_sync_session -> SQLite
# ============================================================================
@pytest.fixture(autouse=True)
def patch_db_stack_for_unit(request, monkeypatch, _Session_unit):
    """Rend impossible l'usage de Postgres pendant les tests unitaires."""
    if not _is_unit(request):
        return

    @contextmanager
    def _fake_get_sync_session():
        with _Session_unit() as s:
            yield s

    sess_mod = importlib.import_module("app.infrastructure.persistence.database.session")
    monkeypatch.setattr(sess_mod, "get_sync_session", _fake_get_sync_session)
