from __future__ import annotations
"""server/app/infrastructure/persistence/database/models/alert.py
~~~~~~~~~~~~~~~~~~~~~~~~
Table alerts (copie des échantillons en alerte, même clé que iot_data).
"""
from sqlalchemy import JSON, BigInteger, DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from app.infrastructure.persistence.database.base import Base
import datetime as dt


class Alert(Base):
    __tablename__ = "alerts"

    subject_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    ts_ms: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    device_id: Mapped[str] = mapped_column(String(128))
    temperature_c: Mapped[float] = mapped_column(Float)
    heart_rate_bpm: Mapped[int] = mapped_column(Integer)
    ecg: Mapped[list] = mapped_column(JSON)
    reason: Mapped[str] = mapped_column(String(64))
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=lambda: dt.datetime.now(dt.timezone.utc))
