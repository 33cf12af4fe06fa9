from __future__ import annotations
"""server/app/infrastructure/persistence/database/models/sample.py
~~~~~~~~~~~~~~~~~~~~~~~~
Table iot_data (échantillons bruts + dérivés, append-only).

Clé = (subject_id, ts_ms) : deux échantillons du même sujet à la même
milliseconde s'écrasent (conflation acceptée).
"""
from sqlalchemy import JSON, BigInteger, Boolean, DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from app.infrastructure.persistence.database.base import Base
import datetime as dt


class Sample(Base):
    __tablename__ = "iot_data"

    subject_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    ts_ms: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    device_id: Mapped[str] = mapped_column(String(128), index=True)
    temperature_c: Mapped[float] = mapped_column(Float)
    heart_rate_bpm: Mapped[int] = mapped_column(Integer)
    alert: Mapped[bool] = mapped_column(Boolean, default=False)
    ecg: Mapped[list] = mapped_column(JSON)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=lambda: dt.datetime.now(dt.timezone.utc))
