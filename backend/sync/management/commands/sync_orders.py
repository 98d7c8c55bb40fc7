from django.core.management.base import BaseCommand, CommandError

from sync.models import SyncRun
from sync.services import OrderSyncService


class Command(BaseCommand):
    help = "Push pending orders to the remote ledger (one sync pass)"

    def handle(self, *args, **options):
        status = OrderSyncService.status()
        self.stdout.write(f"Pending orders: {status['pending_count']}")

        result = OrderSyncService.sync_now(trigger=SyncRun.Trigger.MANUAL)

        if result.status == SyncRun.RunStatus.SUCCESS:
            self.stdout.write(self.style.SUCCESS(f"Synced {len(result.order_ids)} orders."))
        elif result.status == SyncRun.RunStatus.NOTHING_PENDING:
            self.stdout.write("Nothing to sync.")
        elif result.status == SyncRun.RunStatus.FAILED:
            raise CommandError(f"Sync failed, orders remain pending: {result.error}")
        else:
            self.stdout.write(self.style.WARNING(f"Sync {result.status}."))
