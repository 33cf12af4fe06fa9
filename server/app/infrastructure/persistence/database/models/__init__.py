from __future__ import annotations
"""server/app/infrastructure/persistence/database/models/__init__.py
~~~~~~~~~~~~~~~~~~~~~~~~
Modèles ORM (enregistrés sur Base.metadata).
"""

from .sample import Sample
from .alert import Alert
from .actuator_state import ActuatorStateRow

__all__ = ["Sample", "Alert", "ActuatorStateRow"]
