"""
Celery tasks for the remote ledger sync.

Tasks:
- sync_pending_orders: one pass, queued after ledger writes
- sync_pending_orders_periodic: beat tick; runs a pass when auto-sync is on
  and the store's sync interval has elapsed since the last pass
"""
from celery import shared_task
import logging

from settings.config import app_settings
from sync.models import SyncRun
from sync.services import OrderSyncService

logger = logging.getLogger(__name__)


@shared_task(ignore_result=True)
def sync_pending_orders(trigger=SyncRun.Trigger.MANUAL):
    result = OrderSyncService.sync_now(trigger=trigger)
    return result.as_dict()


@shared_task
def sync_pending_orders_periodic():
    """
    Scheduled sync. Beat wakes this every SYNC_TIMER_TICK_SECONDS; the
    interval itself is a store setting, so it is checked here.
    """
    # Settings may have been changed from the API process since the last tick
    app_settings.reload()

    if not app_settings.auto_sync_enabled:
        logger.debug("Scheduled sync skipped: auto-sync is disabled")
        return {"status": "disabled"}

    if not OrderSyncService.is_scheduled_sync_due():
        return {"status": "not_due"}

    result = OrderSyncService.sync_now(trigger=SyncRun.Trigger.SCHEDULED)
    logger.info(f"Scheduled sync finished: {result.status} ({len(result.order_ids)} orders)")
    return result.as_dict()
