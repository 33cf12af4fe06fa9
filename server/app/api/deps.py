from __future__ import annotations
"""
server/app/api/deps.py
~~~~~~~~~~~~~~~~~~~~~~
Dépendances FastAPI : construction des services avec leurs stores.

Les endpoints ne connaissent que IngestionGateway / QueryService ; en test on
remplace ces fabriques via `app.dependency_overrides`.
"""

from app.application.services.ingestion_service import IngestionGateway
from app.application.services.query_service import QueryService
from app.application.services.vital_signs_service import VitalSignAnalyzer
from app.core.config import settings
from app.infrastructure.persistence.stores import SqlActuatorRegistry, SqlAlertStore, SqlSampleStore
from app.workers.tasks.replay_tasks import defer_secondary_write


def get_ingestion_gateway() -> IngestionGateway:
    return IngestionGateway(
        samples=SqlSampleStore(),
        alerts=SqlAlertStore(),
        actuators=SqlActuatorRegistry(),
        analyzer=VitalSignAnalyzer.from_settings(),
        defer=defer_secondary_write if settings.DEFER_FAILED_WRITES else None,
    )


def get_query_service() -> QueryService:
    return QueryService(samples=SqlSampleStore(), alerts=SqlAlertStore())
