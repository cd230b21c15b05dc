# payables/services/exceptions.py

"""
PAYABLES LEDGER ERRORS

Centralized domain errors for the payables services.

Every error carries a stable machine-readable `code` so the
presentation layer can map failures without string matching.
"""

from decimal import Decimal


class LedgerError(Exception):
    """Base exception for all payables ledger failures."""

    code = "LEDGER_ERROR"


class NotFoundError(LedgerError):
    """Raised when a referenced supplier, order, debt or payment does not exist."""

    code = "NOT_FOUND"


class SupplierMismatchError(LedgerError):
    """Raised when a debt does not belong to the referenced supplier."""

    code = "SUPPLIER_MISMATCH"


class InvalidAmountError(LedgerError):
    code = "INVALID_AMOUNT"


class InvalidPaymentMethodError(LedgerError):
    code = "INVALID_PAYMENT_METHOD"


class InvalidDateError(LedgerError):
    """Raised when a date argument cannot be parsed."""

    code = "INVALID_DATE"


class InvalidCreditDaysError(LedgerError):
    code = "INVALID_CREDIT_DAYS"


class AlreadySettledError(LedgerError):
    """Raised when paying a debt that is already PAID."""

    code = "ALREADY_SETTLED"


class OverpaymentError(LedgerError):
    """Raised when a payment would exceed what is still owed."""

    code = "OVERPAYMENT"

    def __init__(self, message: str, *, max_allowed: Decimal):
        super().__init__(message)
        self.max_allowed = max_allowed


class ConfirmationRequiredError(LedgerError):
    code = "CONFIRMATION_REQUIRED"


class DuplicateConfirmationError(LedgerError):
    """Raised when a confirmation number is already used by an active payment."""

    code = "DUPLICATE_CONFIRMATION"


class AlreadyDeletedError(LedgerError):
    code = "ALREADY_DELETED"


class NoChangesError(LedgerError):
    """Raised when an update supplies nothing that differs from stored values."""

    code = "NO_CHANGES"


class ConcurrencyConflictError(LedgerError):
    """Raised when a transaction keeps conflicting after the retry budget."""

    code = "CONCURRENCY_CONFLICT"


class InvalidSupplierError(LedgerError):
    """Raised when supplier profile data is missing or malformed."""

    code = "INVALID_SUPPLIER"


class DuplicateTaxIdError(LedgerError):
    code = "DUPLICATE_TAX_ID"


class MissingPhoneError(LedgerError):
    code = "MISSING_PHONE"
