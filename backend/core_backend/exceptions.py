"""
Ledger error taxonomy and the DRF exception handler.

Every failure the ledger can surface is one of four kinds:

- LedgerValidationError: bad input or a missing precondition (empty cart,
  no open shift, daily shift cap reached). Nothing was written.
- InvariantViolation: the request would break a ledger rule (second open
  shift, illegal status transition, cancelling a reversal). Nothing was written.
- StorageError: the database transaction failed and was rolled back.
- NetworkError: the remote ledger could not be reached or rejected a batch.
  The sync queue swallows these; orders stay pending.

The exception handler below maps them onto HTTP responses and is the fault
barrier for the API: anything unexpected is logged and turned into a 500
response instead of escaping the view.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class LedgerError(Exception):
    """Base class for all ledger failures."""

    code = "ledger_error"
    http_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class LedgerValidationError(LedgerError):
    code = "validation_error"
    http_status = status.HTTP_400_BAD_REQUEST


class EmptyCartError(LedgerValidationError):
    code = "empty_cart"


class NoOpenShiftError(LedgerValidationError):
    code = "no_open_shift"


class ShiftLimitReachedError(LedgerValidationError):
    code = "shift_limit_reached"


class OrderNotFoundError(LedgerValidationError):
    code = "order_not_found"
    http_status = status.HTTP_404_NOT_FOUND


class InvariantViolation(LedgerError):
    code = "invariant_violation"
    http_status = status.HTTP_409_CONFLICT


class ShiftAlreadyOpenError(InvariantViolation):
    code = "shift_already_open"


class InvalidTransitionError(InvariantViolation):
    code = "invalid_transition"


class StorageError(LedgerError):
    code = "storage_error"
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE


class NetworkError(LedgerError):
    code = "network_error"
    http_status = status.HTTP_502_BAD_GATEWAY


def ledger_exception_handler(exc, context):
    """
    Map ledger errors to JSON responses and contain anything unexpected.
    """
    view = context.get("view")
    view_name = view.__class__.__name__ if view else "unknown"

    if isinstance(exc, LedgerError):
        payload = {"error": exc.message, "code": exc.code}
        if exc.details:
            payload["details"] = exc.details
        return Response(payload, status=exc.http_status)

    # Let DRF handle its own exceptions (validation, 404, method not allowed...)
    response = exception_handler(exc, context)
    if response is not None:
        return response

    logger.exception(f"Unhandled error in {view_name}: {exc}")
    return Response(
        {"error": "Internal server error.", "code": "internal_error"},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
