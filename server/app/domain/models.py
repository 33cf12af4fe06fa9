from __future__ import annotations
"""server/app/domain/models.py
~~~~~~~~~~~~~~~~~~~~~~~~
Objets métier du pipeline (indépendants de la persistance).

Noms Python en snake_case ; les alias sont les noms "fil" échangés avec
les devices et les consommateurs (deviceId, subjectId, temperature,
heartRate...). Sérialiser avec `to_wire()` pour l'API, `model_dump()` pour
les tâches Celery (JSON-ready via mode="json").
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from app.domain.policies import ALERT_REASON

BuzzerCommand = Literal["on", "off"]


class VitalSample(BaseModel):
    """Une lecture ingérée (clé : subject_id + timestamp)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    device_id: str = Field(alias="deviceId")
    subject_id: str = Field(alias="subjectId")
    temperature_c: float = Field(alias="temperature")
    ecg: list[float]
    timestamp: int
    heart_rate_bpm: int = Field(alias="heartRate")
    alert: bool

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class AlertRecord(VitalSample):
    """Échantillon en alerte, dupliqué pour les lectures "alertes seules"."""

    alert: bool = True
    reason: str = ALERT_REASON

    @classmethod
    def from_sample(cls, sample: VitalSample, reason: str = ALERT_REASON) -> "AlertRecord":
        return cls(**sample.model_dump(), reason=reason)


class ActuatorState(BaseModel):
    """Dernière commande buzzer d'un device (une seule valeur vivante)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    device_id: str = Field(alias="deviceId")
    buzzer: BuzzerCommand
    reason: str
    timestamp: int

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class IngestResult(BaseModel):
    accepted: bool = True
    alert: bool
    heart_rate_bpm: int
    timestamp: int
    completed_steps: list[str] = Field(default_factory=list)
    deferred_steps: list[str] = Field(default_factory=list)
