from __future__ import annotations
"""
server/app/application/services/ingestion_service.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Service d’orchestration de l’ingestion des échantillons device.

Rôle :
    - Valider le payload (TelemetryPayload) -> InvalidPayload, rien n'est écrit
    - Assigner le timestamp (payload ou horloge injectée)
    - Estimer le rythme cardiaque (VitalSignAnalyzer)
    - Décider de l’alerte (policies.evaluate_alert)
    - Saga d’écritures, chacune idempotente (clé déterministe) + retry borné :
        4) sample       -> obligatoire : échec final = StoreUnavailable
        5) alert        -> best-effort (si alerte)
        6) actuator     -> best-effort (commande buzzer on/off)
      Un échec final sur 5/6 est loggé, confié au hook `defer` (rejeu
      Celery) et la requête reste acceptée.

Les stores sont injectés (ports) : SQL en prod, fakes en mémoire en tests.
"""

import logging
import time
from typing import Any, Callable, Mapping

from pydantic import ValidationError

from app.api.schemas.telemetry import TelemetryPayload
from app.application.services.vital_signs_service import VitalSignAnalyzer
from app.core.config import settings
from app.core.utils.datetime import now_ms
from app.core.utils.retry import call_with_retry
from app.domain import policies
from app.domain.errors import InvalidPayload, StoreUnavailable
from app.domain.models import ActuatorState, AlertRecord, IngestResult, VitalSample
from app.domain.ports import ActuatorRegistry, AlertStore, SampleStore

logger = logging.getLogger(__name__)

STEP_SAMPLE = "sample"
STEP_ALERT = "alert"
STEP_ACTUATOR = "actuator"

# (step, record JSON-ready) -> None
DeferHook = Callable[[str, dict], None]


def _validate(payload: Mapping[str, Any] | TelemetryPayload) -> TelemetryPayload:
    if isinstance(payload, TelemetryPayload):
        return payload
    if not isinstance(payload, Mapping):
        raise InvalidPayload("Invalid input data", errors=[{"msg": "payload must be a JSON object"}])
    try:
        return TelemetryPayload.model_validate(dict(payload))
    except ValidationError as exc:
        raise InvalidPayload(
            "Invalid input data",
            errors=exc.errors(include_url=False, include_context=False, include_input=False),
        ) from exc


class IngestionGateway:
    def __init__(
        self,
        *,
        samples: SampleStore,
        alerts: AlertStore,
        actuators: ActuatorRegistry,
        analyzer: VitalSignAnalyzer | None = None,
        clock: Callable[[], int] = now_ms,
        retry_attempts: int | None = None,
        retry_backoff_seconds: float | None = None,
        defer: DeferHook | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.samples = samples
        self.alerts = alerts
        self.actuators = actuators
        self.analyzer = analyzer or VitalSignAnalyzer.from_settings()
        self.clock = clock
        self.retry_attempts = settings.STORE_RETRY_ATTEMPTS if retry_attempts is None else retry_attempts
        self.retry_backoff_seconds = (
            settings.STORE_RETRY_BACKOFF_SECONDS if retry_backoff_seconds is None else retry_backoff_seconds
        )
        self.defer = defer
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Étapes
    # ------------------------------------------------------------------

    def _write(self, step: str, fn: Callable[[], Any]) -> None:
        call_with_retry(
            fn,
            attempts=self.retry_attempts,
            backoff_seconds=self.retry_backoff_seconds,
            retry_on=(StoreUnavailable,),
            step=step,
            sleep=self._sleep,
        )

    def _secondary(self, step: str, fn: Callable[[], Any], record: dict, key: dict,
                   completed: list[str], deferred: list[str]) -> None:
        """Étape best-effort : log + rejeu différé, jamais d’échec de la requête."""
        try:
            self._write(step, fn)
        except StoreUnavailable as exc:
            logger.error(
                "ingest.step_failed",
                extra={"step": step, **key, "error": str(exc), "completed": list(completed)},
            )
            deferred.append(step)
            self._defer(step, record, key)
        else:
            completed.append(step)

    def _defer(self, step: str, record: dict, key: dict) -> None:
        if self.defer is None:
            return
        try:
            self.defer(step, record)
            logger.info("ingest.step_deferred", extra={"step": step, **key})
        except Exception as exc:  # broker indisponible : on garde le 200, l’échec est loggé
            logger.error("ingest.defer_failed", extra={"step": step, **key, "error": str(exc)})

    # ------------------------------------------------------------------
    # Point d’entrée
    # ------------------------------------------------------------------

    def ingest(self, payload: Mapping[str, Any] | TelemetryPayload) -> IngestResult:
        """
        Ingestion complète d’un échantillon device.

        Exceptions :
          - InvalidPayload (400) : payload invalide, aucune écriture
          - InvalidInput / InsufficientSignal (422) : rythme non estimable, aucune écriture
          - StoreUnavailable (500) : échec final de l’écriture de l’échantillon
        """
        data = _validate(payload)

        # 1) timestamp
        timestamp = data.timestamp if data.timestamp is not None else int(self.clock())

        # 2) rythme cardiaque (les erreurs d’analyse remontent telles quelles)
        heart_rate = self.analyzer.estimate_heart_rate(data.ecg, data.sampling_rate_hz)

        # 3) décision
        alert = policies.evaluate_alert(data.temperature_c, heart_rate)

        sample = VitalSample(
            device_id=data.device_id,
            subject_id=data.subject_id,
            temperature_c=data.temperature_c,
            ecg=list(data.ecg),
            timestamp=timestamp,
            heart_rate_bpm=heart_rate,
            alert=alert,
        )
        key = {"subject_id": sample.subject_id, "device_id": sample.device_id, "timestamp": timestamp}
        completed: list[str] = []
        deferred: list[str] = []

        # 4) échantillon : contrat principal
        try:
            self._write(STEP_SAMPLE, lambda: self.samples.put(sample))
        except StoreUnavailable as exc:
            logger.error("ingest.step_failed", extra={"step": STEP_SAMPLE, **key, "error": str(exc)})
            raise
        completed.append(STEP_SAMPLE)
        logger.info("ingest.sample_saved", extra={**key, "heart_rate": heart_rate, "alert": alert})

        # 5) alerte
        if alert:
            record = AlertRecord.from_sample(sample, reason=policies.ALERT_REASON)
            self._secondary(
                STEP_ALERT, lambda: self.alerts.put(record), record.model_dump(mode="json"), key, completed, deferred
            )

        # 6) commande buzzer
        state = ActuatorState(
            device_id=sample.device_id,
            buzzer=policies.buzzer_command(alert),
            reason=policies.alert_reason(alert),
            timestamp=timestamp,
        )
        self._secondary(
            STEP_ACTUATOR, lambda: self.actuators.set(state), state.model_dump(mode="json"), key, completed, deferred
        )

        logger.info("ingest.completed", extra={**key, "completed": completed, "deferred": deferred})
        return IngestResult(
            alert=alert,
            heart_rate_bpm=heart_rate,
            timestamp=timestamp,
            completed_steps=completed,
            deferred_steps=deferred,
        )
