from __future__ import annotations
"""server/app/api/v1/router.py
~~~~~~~~~~~~~~~~~~~~~~~~
Router principal (chemins attendus par les devices, sans préfixe).
"""
from fastapi import APIRouter
from app.api.v1.endpoints import alerts, health, iot, subjects


api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(iot.router, tags=["iot"])
api_router.include_router(subjects.router, tags=["subjects"])
api_router.include_router(alerts.router, tags=["alerts"])
