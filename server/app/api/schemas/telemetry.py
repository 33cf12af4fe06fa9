from __future__ import annotations
"""server/app/api/schemas/telemetry.py
~~~~~~~~~~~~~~~~~~~~~~~~
Schéma du payload envoyé par les devices (POST /iot-data).

Règles :
- deviceId / subjectId : chaînes non vides (motherId accepté en alias legacy)
- temperature : nombre fini (bool et chaînes refusés)
- ecg : liste non vide de nombres finis
- timestamp : entier ms, au plus fin de l'an 9999 (optionnel, assigné par le
  serveur sinon)
- samplingRateHz : fréquence ECG du device (optionnelle)
Les champs dérivés (heartRate, alert) envoyés par le device sont ignorés.
"""
import math
from typing import Annotated, Any, Optional

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, StringConstraints


def _finite_number(v: Any) -> float:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise ValueError("must be a number")
    f = float(v)
    if not math.isfinite(f):
        raise ValueError("must be a finite number")
    return f


FiniteNumber = Annotated[float, BeforeValidator(_finite_number)]
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# 9999-12-31T23:59:59.999Z : au-delà, ni datetime ni BIGINT ne suivent
MAX_TIMESTAMP_MS = 253_402_300_799_999


class TelemetryPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    device_id: NonEmptyStr = Field(validation_alias=AliasChoices("deviceId", "device_id"))
    subject_id: NonEmptyStr = Field(validation_alias=AliasChoices("subjectId", "motherId", "subject_id"))
    temperature_c: FiniteNumber = Field(validation_alias=AliasChoices("temperature", "temperatureC", "temperature_c"))
    ecg: list[FiniteNumber] = Field(min_length=1)
    timestamp: Optional[int] = Field(default=None, ge=0, le=MAX_TIMESTAMP_MS, strict=True)
    sampling_rate_hz: Optional[FiniteNumber] = Field(
        default=None,
        gt=0,
        validation_alias=AliasChoices("samplingRateHz", "sampling_rate_hz"),
    )
