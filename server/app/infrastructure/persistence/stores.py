from __future__ import annotations
"""server/app/infrastructure/persistence/stores.py
~~~~~~~~~~~~~~~~~~~~~~~~
Adaptateurs SQL des ports SampleStore / AlertStore / ActuatorRegistry.

- Chaque opération ouvre sa propre session courte et commit : les étapes de
  la saga d'ingestion sont des transactions indépendantes.
- Toute SQLAlchemyError est traduite en StoreUnavailable (rollback fait),
  de même que les erreurs de conversion (OverflowError, ValueError) levées
  pendant l'opération.
- La fabrique de sessions est injectable (tests) ; par défaut on résout
  get_sync_session à l'appel pour suivre les patchs éventuels du module.
"""

import logging
from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.errors import StoreUnavailable
from app.domain.models import ActuatorState, AlertRecord, VitalSample
from app.infrastructure.persistence.database import session as db_session
from app.infrastructure.persistence.repositories.actuator_repository import ActuatorRepository
from app.infrastructure.persistence.repositories.alert_repository import AlertRepository
from app.infrastructure.persistence.repositories.sample_repository import SampleRepository

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], ContextManager[Session]]

_STORE_ERRORS = (SQLAlchemyError, OverflowError, ValueError)


class _SqlStore:
    store_name = "store"

    def __init__(self, session_factory: SessionFactory | None = None):
        self._session_factory = session_factory

    @contextmanager
    def _session(self, op: str, *, commit: bool = False) -> Iterator[Session]:
        factory = self._session_factory or db_session.get_sync_session
        try:
            with factory() as s:
                try:
                    yield s
                    if commit:
                        s.commit()
                except _STORE_ERRORS:
                    s.rollback()
                    raise
        except _STORE_ERRORS as exc:
            logger.error(
                "store.error",
                extra={"store": self.store_name, "op": op, "error": str(exc), "error_type": type(exc).__name__},
            )
            raise StoreUnavailable(f"{self.store_name}.{op} failed") from exc


class SqlSampleStore(_SqlStore):
    store_name = "iot_data"

    def put(self, sample: VitalSample) -> None:
        with self._session("put", commit=True) as s:
            SampleRepository(s).upsert(sample)

    def latest(self, subject_id: str) -> VitalSample | None:
        with self._session("latest") as s:
            return SampleRepository(s).latest(subject_id)

    def history(self, subject_id: str) -> list[VitalSample]:
        with self._session("history") as s:
            return SampleRepository(s).history(subject_id)


class SqlAlertStore(_SqlStore):
    store_name = "alerts"

    def put(self, record: AlertRecord) -> None:
        with self._session("put", commit=True) as s:
            AlertRepository(s).upsert(record)

    def for_subject(self, subject_id: str) -> list[AlertRecord]:
        with self._session("for_subject") as s:
            return AlertRepository(s).for_subject(subject_id)


class SqlActuatorRegistry(_SqlStore):
    store_name = "buzzer_control"

    def set(self, state: ActuatorState, *, only_if_newer: bool = False) -> bool:
        with self._session("set", commit=True) as s:
            return ActuatorRepository(s).upsert(state, only_if_newer=only_if_newer)

    def get(self, device_id: str) -> ActuatorState | None:
        with self._session("get") as s:
            return ActuatorRepository(s).get(device_id)
