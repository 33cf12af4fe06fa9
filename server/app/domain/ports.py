from __future__ import annotations
"""server/app/domain/ports.py
~~~~~~~~~~~~~~~~~~~~~~~~
Contrats des stores injectés dans IngestionGateway / QueryService.

Implémentations :
    - SQL (app.infrastructure.persistence.stores)
    - fakes en mémoire (tests)

Toute erreur de persistance doit remonter en StoreUnavailable.
Les écritures sont des upserts sur clé déterministe : les rejouer est sûr.
"""

from typing import Protocol

from app.domain.models import ActuatorState, AlertRecord, VitalSample


class SampleStore(Protocol):
    def put(self, sample: VitalSample) -> None: ...

    def latest(self, subject_id: str) -> VitalSample | None: ...

    def history(self, subject_id: str) -> list[VitalSample]: ...


class AlertStore(Protocol):
    def put(self, record: AlertRecord) -> None: ...

    def for_subject(self, subject_id: str) -> list[AlertRecord]: ...


class ActuatorRegistry(Protocol):
    def set(self, state: ActuatorState, *, only_if_newer: bool = False) -> bool: ...

    def get(self, device_id: str) -> ActuatorState | None: ...
