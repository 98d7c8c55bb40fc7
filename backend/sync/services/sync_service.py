"""
Outbox sync of orders to the remote ledger.

Orders with sync_status=pending are the outbox. A pass sends them as a single
batch and marks exactly those orders synced when the remote acknowledges the
batch; on any failure every order in the batch stays pending for the next
pass. Delivery is at-least-once: a lost acknowledgement means the same batch
is sent again, and the remote ledger dedupes by order id.
"""
from dataclasses import dataclass, field, asdict
from datetime import timedelta
from typing import List, Optional
import logging

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone

from core_backend.audit import AuditLog
from core_backend.exceptions import NetworkError
from core_backend.models import SystemLog
from orders.models import Order
from settings.config import app_settings
from sync.models import SyncLease, SyncRun
from sync.serializers import SyncOrderSerializer
from .ledger_client import RemoteLedgerClient

logger = logging.getLogger(__name__)

SKIPPED = "skipped"


@dataclass
class SyncResult:
    status: str
    trigger: str
    order_ids: List[str] = field(default_factory=list)
    error: str = ""
    run_id: Optional[int] = None

    @property
    def synced(self) -> bool:
        return self.status == SyncRun.RunStatus.SUCCESS

    def as_dict(self):
        data = asdict(self)
        data["order_count"] = len(self.order_ids)
        return data


class OrderSyncService:
    """
    Single-flight sync of pending orders.

    The in-flight flag is the SyncLease row, taken with one conditional
    UPDATE, so a trigger arriving from any process while a pass runs returns
    immediately instead of starting a second pass.
    """

    @staticmethod
    def is_in_flight() -> bool:
        lease = SyncLease.current()
        return lease is not None and lease.is_held()

    @staticmethod
    def sync_now(trigger: str = SyncRun.Trigger.MANUAL) -> SyncResult:
        token = SyncLease.acquire(str(trigger), settings.SYNC_LOCK_TIMEOUT_SECONDS)
        if token is None:
            logger.info(f"Sync ({trigger}) skipped: another pass is in flight")
            return SyncResult(status=SKIPPED, trigger=trigger)
        try:
            return OrderSyncService._run_pass(trigger)
        finally:
            SyncLease.release(token)

    @staticmethod
    def pending_orders(limit: Optional[int] = None):
        qs = (
            Order.objects.filter(sync_status=Order.SyncStatus.PENDING)
            .order_by("timestamp", "id")
            .prefetch_related("items")
        )
        if limit:
            qs = qs[:limit]
        return qs

    @staticmethod
    def _finish(run: SyncRun, status: str, error: str = "", remote_message: str = "") -> SyncRun:
        run.status = status
        run.error = error
        run.remote_message = remote_message[:255]
        run.finished_at = timezone.now()
        run.save(update_fields=["status", "error", "remote_message", "finished_at"])
        return run

    @staticmethod
    def _run_pass(trigger: str) -> SyncResult:
        run = SyncRun.objects.create(trigger=trigger)
        try:
            return OrderSyncService._push_pending(run, trigger)
        except (NetworkError, DatabaseError) as e:
            error = e.message if isinstance(e, NetworkError) else f"Storage error during sync: {e}"
            logger.warning(f"Sync ({trigger}) of {run.order_count} orders failed, will retry: {error}")
            level = SystemLog.Level.WARN
        except Exception as e:
            # Nothing in a pass may fail the caller; the orders stay pending
            error = f"Unexpected error: {type(e).__name__}: {e}"
            logger.exception(f"Sync ({trigger}) of {run.order_count} orders aborted")
            level = SystemLog.Level.CRITICAL

        AuditLog.sync(
            "Sync failed; orders remain pending",
            details={"trigger": trigger, "order_count": run.order_count, "error": error},
            level=level,
        )
        OrderSyncService._finish(run, SyncRun.RunStatus.FAILED, error=error)
        return SyncResult(status=run.status, trigger=trigger, order_ids=list(run.order_ids), error=error, run_id=run.pk)

    @staticmethod
    def _push_pending(run: SyncRun, trigger: str) -> SyncResult:
        url = app_settings.remote_ledger_url
        if not url:
            logger.warning("Sync skipped: no remote ledger URL configured")
            OrderSyncService._finish(run, SyncRun.RunStatus.NOT_CONFIGURED, error="No remote ledger URL configured")
            return SyncResult(status=run.status, trigger=trigger, run_id=run.pk)

        orders = list(OrderSyncService.pending_orders(limit=app_settings.sync_batch_size))
        if not orders:
            logger.debug(f"Sync ({trigger}): nothing pending")
            OrderSyncService._finish(run, SyncRun.RunStatus.NOTHING_PENDING)
            return SyncResult(status=run.status, trigger=trigger, run_id=run.pk)

        order_ids = [order.id for order in orders]
        run.order_count = len(order_ids)
        run.order_ids = order_ids
        run.save(update_fields=["order_count", "order_ids"])

        response = RemoteLedgerClient(url).log_batch(SyncOrderSerializer(orders, many=True).data)
        now = timezone.now()
        with transaction.atomic():
            marked = Order.objects.filter(
                pk__in=order_ids, sync_status=Order.SyncStatus.PENDING
            ).update(sync_status=Order.SyncStatus.SYNCED, synced_at=now)

        logger.info(f"Sync ({trigger}) succeeded: {marked} of {len(order_ids)} orders marked synced")
        AuditLog.sync(
            f"Synced {len(order_ids)} orders",
            details={"trigger": trigger, "order_ids": order_ids},
        )
        OrderSyncService._finish(run, SyncRun.RunStatus.SUCCESS, remote_message=str(response.get("message", "")))
        return SyncResult(status=run.status, trigger=trigger, order_ids=order_ids, run_id=run.pk)

    @staticmethod
    def schedule_sync(trigger: str) -> bool:
        """
        Queue a best-effort sync pass once the current transaction commits.
        Does nothing while auto-sync is off.
        """
        if not app_settings.auto_sync_enabled:
            return False
        transaction.on_commit(lambda: OrderSyncService._dispatch(trigger))
        return True

    @staticmethod
    def _dispatch(trigger: str) -> None:
        from kombu.exceptions import OperationalError
        from sync.tasks import sync_pending_orders

        try:
            sync_pending_orders.delay(trigger)
        except OperationalError as e:
            # Broker down: the next scheduled pass picks the orders up.
            logger.warning(f"Could not queue sync ({trigger}): {e}")

    @staticmethod
    def last_run() -> Optional[SyncRun]:
        return SyncRun.objects.order_by("-started_at", "-id").first()

    @staticmethod
    def is_scheduled_sync_due(now=None) -> bool:
        last = OrderSyncService.last_run()
        if last is None:
            return True
        now = now or timezone.now()
        return now - last.started_at >= timedelta(minutes=app_settings.sync_interval_minutes)

    @staticmethod
    def status() -> dict:
        last = OrderSyncService.last_run()
        last_success = (
            SyncRun.objects.filter(status__in=[SyncRun.RunStatus.SUCCESS, SyncRun.RunStatus.NOTHING_PENDING])
            .order_by("-started_at", "-id")
            .first()
        )
        return {
            "in_flight": OrderSyncService.is_in_flight(),
            "pending_count": Order.objects.filter(sync_status=Order.SyncStatus.PENDING).count(),
            "auto_sync_enabled": app_settings.auto_sync_enabled,
            "sync_interval_minutes": app_settings.sync_interval_minutes,
            "last_run": last,
            "last_synced_at": last_success.finished_at if last_success else None,
        }
