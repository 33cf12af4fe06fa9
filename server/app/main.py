from __future__ import annotations
"""server/app/main.py
~~~~~~~~~~~~~~~~~~~~~~~~
Point d'entrée FastAPI.
"""
from typing import List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.router import api_router
from app.core.config import settings
from app.core.logging import setup_logging
from app.core.middleware import install_global_middleware
from app.infrastructure.persistence.database.session import create_schema

app = FastAPI(title="Vital Telemetry Server", version="0.1.0")

allow_origins: List[str] = []
if origins := settings.CORS_ALLOW_ORIGINS:
    allow_origins = [o.strip() for o in origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_global_middleware(app)

@app.on_event("startup")
async def startup() -> None:
    setup_logging()
    if settings.AUTO_CREATE_SCHEMA:
        create_schema()

app.include_router(api_router)
