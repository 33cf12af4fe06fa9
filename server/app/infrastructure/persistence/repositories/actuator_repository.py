from __future__ import annotations
"""server/app/infrastructure/persistence/repositories/actuator_repository.py
~~~~~~~~~~~~~~~~~~~~~~~~
Repo buzzer_control (dernière commande par device, last-write-wins).
"""
from sqlalchemy.orm import Session

from app.core.utils.datetime import ms_to_datetime
from app.domain.models import ActuatorState
from app.infrastructure.persistence.database.models.actuator_state import ActuatorStateRow


class ActuatorRepository:
    def __init__(self, session: Session):
        self.s = session

    def get(self, device_id: str) -> ActuatorState | None:
        row = self.s.get(ActuatorStateRow, device_id)
        if row is None:
            return None
        return ActuatorState(device_id=row.device_id, buzzer=row.buzzer, reason=row.reason, timestamp=row.ts_ms)

    def upsert(self, state: ActuatorState, *, only_if_newer: bool = False) -> bool:
        """
        Écrit les trois champs ensemble (buzzer, reason, timestamp).

        only_if_newer : n'écrase pas une commande plus récente déjà stockée
        (utilisé par les rejeux différés). Retourne False si rien n'est écrit.
        """
        if only_if_newer:
            current = self.s.get(ActuatorStateRow, state.device_id)
            if current is not None and current.ts_ms > state.timestamp:
                return False

        self.s.merge(
            ActuatorStateRow(
                device_id=state.device_id,
                buzzer=state.buzzer,
                reason=state.reason,
                ts_ms=state.timestamp,
                commanded_at=ms_to_datetime(state.timestamp),
            )
        )
        self.s.flush()
        return True
