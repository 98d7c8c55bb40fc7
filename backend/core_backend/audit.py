"""
Audit trail helpers.

AuditLog writes SystemLog rows for ledger actions; ledger_operation wraps a
service method so that every failure is logged and audited before it reaches
the caller, and database failures surface as StorageError.
"""
import functools
import logging

from django.db import DatabaseError

from core_backend.exceptions import (
    InvariantViolation,
    LedgerError,
    LedgerValidationError,
    StorageError,
)
from core_backend.models import SystemLog

logger = logging.getLogger(__name__)

MESSAGE_MAX_LENGTH = 255


class AuditLog:
    """Thin writer for SystemLog rows. Never raises."""

    @staticmethod
    def _write(log_type, level, message, details=None, order_id="", shift_id=""):
        try:
            SystemLog.objects.create(
                type=log_type,
                level=level,
                message=message[:MESSAGE_MAX_LENGTH],
                details=details or {},
                order_id=order_id or "",
                shift_id=shift_id or "",
            )
        except DatabaseError as e:
            logger.error(f"Could not write audit log entry '{message}': {e}")

    @staticmethod
    def action(message, details=None, order_id="", shift_id=""):
        AuditLog._write(SystemLog.LogType.ACTION, SystemLog.Level.INFO, message, details, order_id, shift_id)

    @staticmethod
    def warn(message, details=None, order_id="", shift_id=""):
        AuditLog._write(SystemLog.LogType.ACTION, SystemLog.Level.WARN, message, details, order_id, shift_id)

    @staticmethod
    def error(message, details=None, order_id="", shift_id="", level=SystemLog.Level.CRITICAL):
        AuditLog._write(SystemLog.LogType.ERROR, level, message, details, order_id, shift_id)

    @staticmethod
    def sync(message, details=None, level=SystemLog.Level.INFO):
        AuditLog._write(SystemLog.LogType.SYNC, level, message, details)


def ledger_operation(name):
    """
    Decorate a ledger service method.

    The wrapped method must do its own transaction.atomic(); by the time an
    exception reaches this wrapper the transaction has been rolled back.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except (LedgerValidationError, InvariantViolation) as exc:
                logger.warning(f"{name} rejected ({exc.code}): {exc.message}")
                AuditLog.error(
                    f"{name} rejected: {exc.message}",
                    details={"code": exc.code, **exc.details},
                    order_id=exc.details.get("order_id", ""),
                    shift_id=exc.details.get("shift_id", ""),
                    level=SystemLog.Level.WARN,
                )
                raise
            except LedgerError as exc:
                logger.error(f"{name} failed ({exc.code}): {exc.message}")
                AuditLog.error(f"{name} failed: {exc.message}", details={"code": exc.code, **exc.details})
                raise
            except DatabaseError as exc:
                logger.error(f"{name} failed, transaction rolled back: {exc}", exc_info=True)
                AuditLog.error(
                    f"{name} failed: storage error",
                    details={"code": StorageError.code, "error": str(exc)},
                )
                raise StorageError(f"{name} failed and was rolled back: {exc}") from exc

        return wrapper

    return decorator
