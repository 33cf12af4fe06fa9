# server/app/core/utils/retry.py
"""server/app/core/utils/retry.py
~~~~~~~~~~~~~~~~~~~~~~~~
Retry borné avec backoff exponentiel (écritures idempotentes).
"""

from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


def call_with_retry(
    fn: Callable[[], T],
    *,
    attempts: int,
    backoff_seconds: float,
    retry_on: tuple[type[BaseException], ...],
    step: str,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Appelle `fn` jusqu'à `attempts` fois.

    - Seules les exceptions de `retry_on` déclenchent un nouvel essai,
      les autres remontent immédiatement.
    - Délai entre essais : backoff_seconds, x2, x4...
    - Après le dernier essai, la dernière exception remonte telle quelle.
    """
    attempts = max(1, int(attempts))
    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except retry_on as exc:
            if attempt >= attempts:
                raise
            delay = backoff_seconds * (2 ** (attempt - 1))
            logger.warning(
                "retry.scheduled",
                extra={"step": step, "attempt": attempt, "delay_s": delay, "error": str(exc)},
            )
            if delay > 0:
                sleep(delay)
    raise AssertionError("unreachable")  # pragma: no cover
