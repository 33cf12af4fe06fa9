from __future__ import annotations
"""server/app/workers/tasks/replay_tasks.py
Rejeu différé des écritures secondaires de l'ingestion (alerte / buzzer).

- Appelé quand une étape best-effort a épuisé ses retries en ligne.
- Les écritures sont des upserts sur clé déterministe : rejouer est sûr.
- Buzzer : only_if_newer, un rejeu tardif n'écrase jamais une commande
  plus récente.
- StoreUnavailable -> retry Celery (backoff) ; payload invalide -> pas de retry.
"""

from typing import Any, Dict

from celery.utils.log import get_task_logger
from pydantic import ValidationError

from app.application.services.ingestion_service import STEP_ACTUATOR, STEP_ALERT
from app.domain.errors import StoreUnavailable
from app.domain.models import ActuatorState, AlertRecord
from app.infrastructure.persistence.stores import SqlActuatorRegistry, SqlAlertStore
from app.workers.celery_app import celery

logger = get_task_logger(__name__)


def defer_secondary_write(step: str, record: Dict[str, Any]) -> None:
    """
    Hook `defer` de l'IngestionGateway : place le rejeu en file.

    Appelé dans la requête : publication sans retry, un broker absent échoue
    tout de suite (le gateway logge `ingest.defer_failed`).
    """
    replay_write.apply_async(args=(step, record), retry=False)


@celery.task(
    name="tasks.replay_write",
    bind=True,
    autoretry_for=(StoreUnavailable,),
    retry_backoff=30,  # 30s, 60s, 120s...
    retry_kwargs={"max_retries": 5},
    acks_late=True,
    queue="replay",
)
def replay_write(self, step: str, record: Dict[str, Any]) -> str:
    """
    Retourne :
      - "applied"  : écriture faite
      - "stale"    : buzzer déjà commandé plus récemment, rien écrit
      - "rejected" : step inconnu ou record invalide (pas de retry)
    """
    try:
        if step == STEP_ALERT:
            SqlAlertStore().put(AlertRecord.model_validate(record))
            outcome = "applied"
        elif step == STEP_ACTUATOR:
            written = SqlActuatorRegistry().set(ActuatorState.model_validate(record), only_if_newer=True)
            outcome = "applied" if written else "stale"
        else:
            logger.error("replay.unknown_step", extra={"step": step})
            return "rejected"
    except ValidationError as e:
        logger.error("replay.invalid_record", extra={"step": step, "errors": e.errors()})
        return "rejected"

    logger.info("replay.%s", outcome, extra={"step": step, "attempt": self.request.retries})
    return outcome
