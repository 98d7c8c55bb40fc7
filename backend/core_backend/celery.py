"""
Celery configuration for the POS ledger backend.
"""

import os

from celery import Celery

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core_backend.settings")

app = Celery("core_backend")

# namespace='CELERY' means all celery-related configuration keys
# should have a `CELERY_` prefix.
app.config_from_object("django.conf:settings", namespace="CELERY")

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

# The tick only wakes the task; whether a pass actually runs depends on the
# store's auto-sync flag and sync interval.
app.conf.beat_schedule = {
    "sync-pending-orders": {
        "task": "sync.tasks.sync_pending_orders_periodic",
        "schedule": float(os.getenv("SYNC_TIMER_TICK_SECONDS", "60")),
        "options": {"expires": 50},
    },
}
