from __future__ import annotations
"""
server/app/api/v1/endpoints/alerts.py
~~~~~~~~~~~~~~~~~~~~~~~~
GET /alerts/{subject_id}: alertes d'un sujet, plus récente d'abord.

Notes :
- Ordre DÉCROISSANT (inverse de /mother/{id}/history), voulu.
- 404 si aucune alerte.
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_query_service
from app.application.services.query_service import QueryService

router = APIRouter(prefix="/alerts")


@router.get("/{subject_id}")
def list_alerts(subject_id: str, queries: QueryService = Depends(get_query_service)) -> dict:
    return {"alerts": [a.to_wire() for a in queries.get_alerts(subject_id)]}
