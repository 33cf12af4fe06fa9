from __future__ import annotations
"""
server/app/api/v1/endpoints/subjects.py
~~~~~~~~~~~~~~~~~~~~~~~~
GET /mother/{subject_id}/latest:  dernier échantillon (timestamp max)
GET /mother/{subject_id}/history: tous les échantillons, ordre CROISSANT

404 si le sujet n'a aucun échantillon.
"""
from fastapi import APIRouter, Depends

from app.api.deps import get_query_service
from app.application.services.query_service import QueryService

router = APIRouter(prefix="/mother")


@router.get("/{subject_id}/latest")
def latest_sample(subject_id: str, queries: QueryService = Depends(get_query_service)) -> dict:
    return queries.get_latest(subject_id).to_wire()


@router.get("/{subject_id}/history")
def sample_history(subject_id: str, queries: QueryService = Depends(get_query_service)) -> dict:
    return {"history": [s.to_wire() for s in queries.get_history(subject_id)]}
