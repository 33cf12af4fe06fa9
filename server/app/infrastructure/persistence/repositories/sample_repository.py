from __future__ import annotations
"""server/app/infrastructure/persistence/repositories/sample_repository.py
~~~~~~~~~~~~~~~~~~~~~~~~
Repo échantillons (iot_data).

Écriture = upsert sur (subject_id, ts_ms) via Session.merge : rejouer la
même écriture ne crée pas de doublon. Pas de commit ici (géré par l'appelant).
"""
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.domain.models import VitalSample
from app.infrastructure.persistence.database.models.sample import Sample


def _to_domain(row: Sample) -> VitalSample:
    return VitalSample(
        device_id=row.device_id,
        subject_id=row.subject_id,
        temperature_c=row.temperature_c,
        ecg=list(row.ecg or []),
        timestamp=row.ts_ms,
        heart_rate_bpm=row.heart_rate_bpm,
        alert=row.alert,
    )


class SampleRepository:
    def __init__(self, session: Session):
        self.s = session

    def upsert(self, sample: VitalSample) -> None:
        self.s.merge(
            Sample(
                subject_id=sample.subject_id,
                ts_ms=sample.timestamp,
                device_id=sample.device_id,
                temperature_c=sample.temperature_c,
                heart_rate_bpm=sample.heart_rate_bpm,
                alert=sample.alert,
                ecg=list(sample.ecg),
            )
        )
        self.s.flush()

    def latest(self, subject_id: str) -> VitalSample | None:
        row = self.s.scalar(
            select(Sample)
            .where(Sample.subject_id == subject_id)
            .order_by(Sample.ts_ms.desc())
            .limit(1)
        )
        return _to_domain(row) if row else None

    def history(self, subject_id: str) -> list[VitalSample]:
        rows = self.s.scalars(
            select(Sample)
            .where(Sample.subject_id == subject_id)
            .order_by(Sample.ts_ms.asc())
        ).all()
        return [_to_domain(r) for r in rows]
