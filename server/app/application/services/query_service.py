from __future__ import annotations
"""server/app/application/services/query_service.py
~~~~~~~~~~~~~~~~~~~~~~~~
Lecture côté opérateur : dernier échantillon, historique, alertes.

Contrat d'ordre (volontairement asymétrique) :
- get_history : croissant par timestamp
- get_alerts  : décroissant par timestamp (plus récente d'abord)
Le tri est refait ici, quel que soit l'ordre rendu par le store.
Liste vide => NotFound (on ne distingue pas "sujet inconnu" de "aucune donnée").
"""

from app.domain.errors import NotFound
from app.domain.models import AlertRecord, VitalSample
from app.domain.ports import AlertStore, SampleStore


class QueryService:
    def __init__(self, *, samples: SampleStore, alerts: AlertStore):
        self.samples = samples
        self.alerts = alerts

    def get_latest(self, subject_id: str) -> VitalSample:
        sample = self.samples.latest(subject_id)
        if sample is None:
            raise NotFound("No data found", subject_id=subject_id)
        return sample

    def get_history(self, subject_id: str) -> list[VitalSample]:
        history = sorted(self.samples.history(subject_id), key=lambda s: s.timestamp)
        if not history:
            raise NotFound("No history found for this subject", subject_id=subject_id)
        return history

    def get_alerts(self, subject_id: str) -> list[AlertRecord]:
        alerts = sorted(self.alerts.for_subject(subject_id), key=lambda a: a.timestamp, reverse=True)
        if not alerts:
            raise NotFound("No alerts found", subject_id=subject_id)
        return alerts
