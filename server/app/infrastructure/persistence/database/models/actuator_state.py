from __future__ import annotations
"""server/app/infrastructure/persistence/database/models/actuator_state.py
~~~~~~~~~~~~~~~~~~~~~~~~
Table buzzer_control : une ligne par device, écrasée à chaque commande.
"""
from sqlalchemy import BigInteger, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from app.infrastructure.persistence.database.base import Base
import datetime as dt


class ActuatorStateRow(Base):
    __tablename__ = "buzzer_control"

    device_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    buzzer: Mapped[str] = mapped_column(String(8))  # on|off
    reason: Mapped[str] = mapped_column(Text)
    ts_ms: Mapped[int] = mapped_column(BigInteger)
    commanded_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
