from __future__ import annotations
"""
server/app/api/v1/endpoints/iot.py
~~~~~~~~~~~~~~~~~~~~~~~~
POST /iot-data: ingestion d'un échantillon device (ECG + température).

Notes :
- Le corps est lu brut puis validé par le gateway : un payload invalide
  (JSON illisible compris) donne 400, pas le 422 Pydantic de FastAPI.
- Le gateway est synchrone (SQLAlchemy sync) : exécuté dans le threadpool.
"""
import json

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from app.api.deps import get_ingestion_gateway
from app.application.services.ingestion_service import IngestionGateway
from app.domain.errors import InvalidPayload

router = APIRouter()


@router.post("/iot-data", status_code=200)
async def post_iot_data(
    request: Request,
    gateway: IngestionGateway = Depends(get_ingestion_gateway),
) -> dict:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidPayload("Invalid input data", errors=[{"msg": "body must be valid JSON"}]) from exc

    result = await run_in_threadpool(gateway.ingest, payload)
    return {
        "status": "saved",
        "alert": result.alert,
        "heartRate": result.heart_rate_bpm,
        "timestamp": result.timestamp,
    }
