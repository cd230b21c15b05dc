# payables/services/unit_of_work.py

"""
LEDGER UNIT OF WORK

Every ledger mutation (read -> validate -> write -> recompute) runs
inside ONE database transaction via run_in_transaction().

GUARANTEES:
- All-or-nothing: any exception rolls back every write of the attempt.
- Database conflicts (deadlock, serialization failure, lock timeout)
  surface as OperationalError and re-run the whole sequence, up to
  LEDGER["MAX_TRANSACTION_ATTEMPTS"] attempts.
- Business errors (LedgerError) are never retried.
- Exhausted retries raise ConcurrencyConflictError.
"""

import logging
import time

from django.conf import settings
from django.db import OperationalError, transaction

from payables.services.exceptions import ConcurrencyConflictError


logger = logging.getLogger("payables.transactions")


DEFAULT_MAX_ATTEMPTS = 3


def _ledger_setting(key: str, default):
    ledger = getattr(settings, "LEDGER", {}) or {}
    return ledger.get(key, default)


def max_attempts() -> int:
    return max(1, int(_ledger_setting("MAX_TRANSACTION_ATTEMPTS", DEFAULT_MAX_ATTEMPTS)))


def _backoff(attempt: int) -> None:
    delay = float(_ledger_setting("RETRY_BACKOFF_SECONDS", 0.0) or 0.0)
    if delay > 0:
        time.sleep(delay * attempt)


def run_in_transaction(fn, *, label: str = "ledger"):
    """
    Run fn() atomically and return its result.

    fn must be safe to call again from scratch: it re-reads and re-locks
    everything it touches on every attempt.
    """

    attempts = max_attempts()

    for attempt in range(1, attempts + 1):
        try:
            with transaction.atomic():
                return fn()
        except OperationalError as exc:
            if attempt >= attempts:
                logger.error(
                    "Ledger transaction failed after retries",
                    extra={"operation": label, "attempts": attempt},
                )
                raise ConcurrencyConflictError(
                    f"{label} could not be completed because of concurrent "
                    f"updates ({attempt} attempts). Please retry."
                ) from exc

            logger.warning(
                "Ledger transaction conflict, retrying",
                extra={"operation": label, "attempt": attempt, "error": str(exc)},
            )
            _backoff(attempt)
