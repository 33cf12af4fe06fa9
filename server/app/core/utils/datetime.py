# coding: utf-8
# server/app/core/utils/datetime.py
"""server/app/core/utils/datetime.py
~~~~~~~~~~~~~~~~~~~~~~~~
Utilitaires pour la gestion des dates et heures.

Les timestamps d'échantillons sont des entiers en millisecondes depuis
l'epoch (format envoyé par les devices).
"""

from datetime import datetime, timezone
from typing import Optional


def now_ms() -> int:
    """Horodatage courant (UTC) en millisecondes depuis l'epoch."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def ms_to_datetime(ms: Optional[int]) -> Optional[datetime]:
    """Convertit un timestamp en ms vers un datetime UTC (tolère None)."""
    if ms is None:
        return None
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
