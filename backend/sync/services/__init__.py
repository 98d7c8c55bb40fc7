from .ledger_client import RemoteLedgerClient
from .sync_service import OrderSyncService, SyncResult

__all__ = ["OrderSyncService", "RemoteLedgerClient", "SyncResult"]
