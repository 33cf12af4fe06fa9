from __future__ import annotations
"""server/app/infrastructure/persistence/repositories/alert_repository.py
~~~~~~~~~~~~~~~~~~~~~~~~
Repo alerts.
"""
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.domain.models import AlertRecord
from app.infrastructure.persistence.database.models.alert import Alert


class AlertRepository:
    """Repository des alertes (une ligne par échantillon en alerte)."""

    def __init__(self, session: Session):
        """Initialise le repository avec une session SQLAlchemy."""
        self.s = session

    def upsert(self, record: AlertRecord) -> None:
        """
        Écrit l'alerte à la clé (subject_id, timestamp).

        Une alerte n'est jamais mise à jour métier : un second upsert à la
        même clé ne peut venir que d'un rejeu ou d'un échantillon identique.
        """
        self.s.merge(
            Alert(
                subject_id=record.subject_id,
                ts_ms=record.timestamp,
                device_id=record.device_id,
                temperature_c=record.temperature_c,
                heart_rate_bpm=record.heart_rate_bpm,
                ecg=list(record.ecg),
                reason=record.reason,
            )
        )
        self.s.flush()

    def for_subject(self, subject_id: str, *, newest_first: bool = True) -> list[AlertRecord]:
        """
        Liste les alertes d'un sujet.

        Args:
            subject_id: sujet surveillé
            newest_first: tri décroissant par timestamp (défaut) ou croissant

        Returns:
            Liste d'AlertRecord (vide si aucune alerte)
        """
        order = Alert.ts_ms.desc() if newest_first else Alert.ts_ms.asc()
        rows = self.s.scalars(
            select(Alert).where(Alert.subject_id == subject_id).order_by(order)
        ).all()
        return [
            AlertRecord(
                device_id=r.device_id,
                subject_id=r.subject_id,
                temperature_c=r.temperature_c,
                ecg=list(r.ecg or []),
                timestamp=r.ts_ms,
                heart_rate_bpm=r.heart_rate_bpm,
                alert=True,
                reason=r.reason,
            )
            for r in rows
        ]
