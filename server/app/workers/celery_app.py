from __future__ import annotations
"""app/workers/celery_app.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Celery app + routage + auto-import des modules de tâches.
"""
from celery import Celery

from app.core.config import settings

celery = Celery("telemetry", broker=settings.REDIS_URL, backend=settings.REDIS_URL)

# Routage par files
celery.conf.task_routes = {
    "tasks.replay_write": {"queue": "replay"},
}

celery.conf.task_default_retry_delay = 30  # 30 secondes
celery.conf.task_max_retries = 5

celery.conf.update(
    imports=[
        "app.workers.tasks.replay_tasks",
    ],
)
