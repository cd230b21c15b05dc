# payables/services/payment_service.py

"""
PAYMENT LIFECYCLE MANAGER

Create, amend and retract payments against debts.

State machine (per payment):
    (none) --create--> ACTIVE --soft_delete--> DELETED (terminal)
    ACTIVE --update--> ACTIVE

Every mutation is ONE unit of work (run_in_transaction):
    lock suppliers -> lock debts -> lock payment (replay if it moved)
    -> validate -> write payment
    -> recompute affected debts -> recompute affected suppliers

Derived balances are never patched here; the AggregateCalculator owns them.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
import logging

from django.db import IntegrityError, OperationalError
from django.utils import timezone
from django.utils.dateparse import parse_date

from payables.models import Payment
from payables.services import store
from payables.services.aggregate_service import AggregateCalculator
from payables.services.exceptions import (
    AlreadyDeletedError,
    AlreadySettledError,
    ConfirmationRequiredError,
    DuplicateConfirmationError,
    InvalidAmountError,
    InvalidDateError,
    InvalidPaymentMethodError,
    MissingPhoneError,
    NoChangesError,
    NotFoundError,
    OverpaymentError,
    SupplierMismatchError,
)
from payables.services.receipt_storage import ReceiptStorage
from payables.services.unit_of_work import run_in_transaction


logger = logging.getLogger("payables.payments")


TWOPLACES = Decimal("0.01")
FOURPLACES = Decimal("0.0001")
ZERO = Decimal("0.00")

MIN_SEARCH_LENGTH = 3

CONFIRMATION_CONSTRAINT = "uniq_active_payment_confirmation_number"

UPDATABLE_FIELDS = frozenset(
    {
        "debt_id",
        "supplier_id",
        "amount",
        "payment_method",
        "sender_name",
        "sender_email",
        "confirmation_number",
        "payment_date",
        "exchange_rate",
        "amount_in_bolivares",
        "receipt_files",
        "kept_receipt_files",
    }
)


# ============================================================
# INPUT NORMALIZATION
# ============================================================


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _parse_amount(v) -> Decimal:
    try:
        return _money(v)
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise InvalidAmountError(f"Invalid amount: {v!r}") from exc


def _optional_decimal(v, places: Decimal, *, label: str):
    if v in (None, "", 0):
        return None
    try:
        return Decimal(str(v)).quantize(places, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise InvalidAmountError(f"Invalid {label}: {v!r}") from exc


def _normalize_method(v) -> str:
    method = str(v or "").strip().upper()
    if method not in {m for m, _ in Payment.METHODS}:
        raise InvalidPaymentMethodError(
            f"Invalid payment_method {v!r}. Use ZELLE, TRANSFER or CASH."
        )
    return method


def _clean_confirmation(v):
    if v is None:
        return None
    return str(v).strip() or None


def _as_date(v):
    if v is None or isinstance(v, date):
        return v
    parsed = parse_date(str(v))
    if parsed is None:
        raise InvalidDateError(f"Invalid date: {v!r}")
    return parsed


def _same_id(a, b) -> bool:
    return str(a) == str(b)


def _is_confirmation_conflict(exc: IntegrityError) -> bool:
    # Postgres reports the constraint name, SQLite the indexed column.
    message = str(exc)
    return (
        CONFIRMATION_CONSTRAINT in message
        or "payables_payment.confirmation_number" in message
    )


def _ensure_lock_set(locked: Payment, snapshot: Payment) -> None:
    # The lock set was chosen from an unlocked read; a payment moved in
    # between must be replayed against its new rows.
    if not (
        _same_id(locked.debt_id, snapshot.debt_id)
        and _same_id(locked.supplier_id, snapshot.supplier_id)
    ):
        raise OperationalError(
            f"Payment {locked.pk} moved while its rows were being locked"
        )


def _dedupe(names) -> list:
    seen = []
    for name in names or []:
        if name and name not in seen:
            seen.append(name)
    return seen


# ============================================================
# LIFECYCLE MANAGER
# ============================================================


class PaymentLifecycleManager:
    def __init__(self, calculator=None, storage=None):
        self.calculator = calculator or AggregateCalculator()
        self.storage = storage or ReceiptStorage()

    # --------------------------------------------------------
    # CREATE
    # --------------------------------------------------------

    def create(
        self,
        *,
        debt_id,
        supplier_id,
        amount,
        payment_method: str,
        sender_name: str,
        payment_date=None,
        confirmation_number: str | None = None,
        sender_email: str | None = None,
        exchange_rate=None,
        amount_in_bolivares=None,
        receipt_files=(),
        created_by=None,
    ) -> Payment:
        logger.info(
            "Creating payment",
            extra={
                "debt_id": str(debt_id),
                "supplier_id": str(supplier_id),
                "amount": str(amount),
                "payment_method": payment_method,
            },
        )

        amt = _parse_amount(amount)
        method = _normalize_method(payment_method)
        confirmation = _clean_confirmation(confirmation_number)
        pay_date = _as_date(payment_date) or timezone.localdate()
        rate = _optional_decimal(exchange_rate, FOURPLACES, label="exchange_rate")
        bolivares = _optional_decimal(
            amount_in_bolivares, TWOPLACES, label="amount_in_bolivares"
        )
        files = _dedupe(receipt_files)

        def _work():
            store.lock_suppliers([supplier_id])
            debt = store.lock_debts([debt_id]).get(str(debt_id))
            if debt is None:
                raise NotFoundError("Debt not found")

            if not _same_id(debt.supplier_id, supplier_id):
                raise SupplierMismatchError("Debt does not belong to this supplier")

            if amt <= ZERO:
                raise InvalidAmountError("Payment amount must be > 0")

            if debt.is_settled:
                raise AlreadySettledError(
                    "This debt is already fully paid. No more payments can be recorded."
                )

            if amt > debt.remaining_amount:
                raise OverpaymentError(
                    f"Payment amount ({amt}) exceeds the remaining debt. "
                    f"Maximum allowed: {debt.remaining_amount}",
                    max_allowed=debt.remaining_amount,
                )

            if method in Payment.CONFIRMED_METHODS and not confirmation:
                raise ConfirmationRequiredError(
                    "A confirmation number is required for this payment method"
                )

            if confirmation and store.confirmation_in_use(confirmation):
                raise DuplicateConfirmationError(
                    "A payment with this confirmation number already exists"
                )

            payment = Payment(
                debt=debt,
                supplier_id=debt.supplier_id,
                amount=amt,
                payment_method=method,
                sender_name=(sender_name or "").strip(),
                sender_email=(sender_email or "").strip() or None,
                confirmation_number=confirmation,
                payment_date=pay_date,
                exchange_rate=rate,
                amount_in_bolivares=bolivares,
                receipt_files=files,
                created_by=created_by,
            )
            self._save(payment)

            self.calculator.recompute_debt(debt.pk)
            supplier = self.calculator.recompute_supplier(debt.supplier_id)
            supplier.last_payment_date = pay_date
            supplier.save(update_fields=["last_payment_date", "updated_at"])

            return payment

        payment = run_in_transaction(_work, label="create_payment")

        logger.info(
            "Payment created",
            extra={"payment_id": str(payment.pk), "debt_id": str(payment.debt_id)},
        )
        return payment

    # --------------------------------------------------------
    # UPDATE
    # --------------------------------------------------------

    def update(self, payment_id, **changes) -> Payment:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise TypeError(f"Unsupported payment fields: {', '.join(sorted(unknown))}")

        logger.info(
            "Updating payment",
            extra={"payment_id": str(payment_id), "fields": sorted(changes)},
        )

        orphaned: list[str] = []

        def _work():
            orphaned.clear()

            current = store.get_payment(payment_id)
            target_debt_id = changes.get("debt_id") or current.debt_id
            target_supplier_id = changes.get("supplier_id") or current.supplier_id

            store.lock_suppliers([current.supplier_id, target_supplier_id])
            debts = store.lock_debts([current.debt_id, target_debt_id])
            payment = store.get_payment(payment_id, for_update=True)
            _ensure_lock_set(payment, current)

            if not payment.is_active:
                raise AlreadyDeletedError("This payment has been deleted")

            updates = self._collect_changes(payment, changes)
            if not updates:
                raise NoChangesError("No changes to apply")

            old_debt_id = payment.debt_id
            old_supplier_id = payment.supplier_id

            target_debt = debts.get(str(target_debt_id))
            if target_debt is None:
                raise NotFoundError("Debt not found")

            if not _same_id(target_debt.supplier_id, target_supplier_id):
                raise SupplierMismatchError(
                    "The selected debt does not belong to the selected supplier"
                )

            new_amount = updates.get("amount", payment.amount)
            if "amount" in updates and new_amount <= ZERO:
                raise InvalidAmountError("Payment amount must be > 0")

            if "amount" in updates or "debt_id" in updates:
                others = store.active_payment_total(
                    target_debt.pk, exclude_payment_id=payment.pk
                )
                max_allowed = _money(target_debt.initial_amount) - others
                if new_amount > max_allowed:
                    raise OverpaymentError(
                        f"Payment amount ({new_amount}) exceeds the maximum allowed "
                        f"({max_allowed}). Already paid by other payments: {others}",
                        max_allowed=max_allowed,
                    )

            method = updates.get("payment_method", payment.payment_method)
            confirmation = updates.get("confirmation_number", payment.confirmation_number)
            if method in Payment.CONFIRMED_METHODS and not confirmation:
                raise ConfirmationRequiredError(
                    "A confirmation number is required for this payment method"
                )

            if (
                "confirmation_number" in updates
                and confirmation
                and store.confirmation_in_use(confirmation, exclude_payment_id=payment.pk)
            ):
                raise DuplicateConfirmationError(
                    "A payment with this confirmation number already exists"
                )

            if "receipt_files" in updates:
                kept = set(updates["receipt_files"])
                orphaned.extend(
                    n for n in (payment.receipt_files or []) if n not in kept
                )

            for field, value in updates.items():
                setattr(payment, field, value)
            self._save(payment, update_fields=[*updates, "updated_at"])

            for debt_pk in _dedupe([str(old_debt_id), str(payment.debt_id)]):
                self.calculator.recompute_debt(debt_pk)

            supplier = None
            for supplier_pk in _dedupe([str(old_supplier_id), str(payment.supplier_id)]):
                supplier = self.calculator.recompute_supplier(supplier_pk)

            supplier_changed = not _same_id(old_supplier_id, payment.supplier_id)
            if changes.get("payment_date") is not None or supplier_changed:
                supplier.last_payment_date = payment.payment_date
                supplier.save(update_fields=["last_payment_date", "updated_at"])

            self.storage.schedule_deletion(list(orphaned))
            return payment

        payment = run_in_transaction(_work, label="update_payment")

        logger.info(
            "Payment updated",
            extra={
                "payment_id": str(payment.pk),
                "removed_receipts": len(orphaned),
            },
        )
        return payment

    def _collect_changes(self, payment: Payment, changes: dict) -> dict:
        """Normalize supplied values and keep only those that differ."""
        updates = {}

        if changes.get("debt_id") and not _same_id(changes["debt_id"], payment.debt_id):
            updates["debt_id"] = changes["debt_id"]

        if changes.get("supplier_id") and not _same_id(
            changes["supplier_id"], payment.supplier_id
        ):
            updates["supplier_id"] = changes["supplier_id"]

        if "amount" in changes:
            amt = _parse_amount(changes["amount"])
            if amt != payment.amount:
                updates["amount"] = amt

        if changes.get("payment_method"):
            method = _normalize_method(changes["payment_method"])
            if method != payment.payment_method:
                updates["payment_method"] = method

        sender_name = (changes.get("sender_name") or "").strip()
        if sender_name and sender_name != payment.sender_name:
            updates["sender_name"] = sender_name

        if "sender_email" in changes:
            email = (changes["sender_email"] or "").strip() or None
            if email != payment.sender_email:
                updates["sender_email"] = email

        if "confirmation_number" in changes:
            confirmation = _clean_confirmation(changes["confirmation_number"])
            if confirmation != payment.confirmation_number:
                updates["confirmation_number"] = confirmation

        if changes.get("payment_date") is not None:
            pay_date = _as_date(changes["payment_date"])
            if pay_date != payment.payment_date:
                updates["payment_date"] = pay_date

        if "exchange_rate" in changes:
            rate = _optional_decimal(
                changes["exchange_rate"], FOURPLACES, label="exchange_rate"
            )
            if rate != payment.exchange_rate:
                updates["exchange_rate"] = rate

        if "amount_in_bolivares" in changes:
            bolivares = _optional_decimal(
                changes["amount_in_bolivares"], TWOPLACES, label="amount_in_bolivares"
            )
            if bolivares != payment.amount_in_bolivares:
                updates["amount_in_bolivares"] = bolivares

        current_files = list(payment.receipt_files or [])
        files = None
        if "kept_receipt_files" in changes:
            files = [n for n in _dedupe(changes["kept_receipt_files"]) if n in current_files]
        if "receipt_files" in changes:
            new_files = _dedupe(changes["receipt_files"])
            files = new_files if files is None else _dedupe([*files, *new_files])
        if files is not None and files != current_files:
            updates["receipt_files"] = files

        return updates

    # --------------------------------------------------------
    # SOFT DELETE
    # --------------------------------------------------------

    def soft_delete(self, payment_id, *, deleted_by=None, reason: str | None = None) -> Payment:
        logger.info("Deleting payment", extra={"payment_id": str(payment_id)})

        def _work():
            current = store.get_payment(payment_id)
            store.lock_suppliers([current.supplier_id])
            store.lock_debts([current.debt_id])
            payment = store.get_payment(payment_id, for_update=True)
            _ensure_lock_set(payment, current)

            if not payment.is_active:
                raise AlreadyDeletedError("This payment has already been deleted")

            payment.deleted_at = timezone.now()
            payment.deleted_by = deleted_by
            payment.deletion_reason = (reason or "").strip() or None
            payment.save(
                update_fields=["deleted_at", "deleted_by", "deletion_reason", "updated_at"]
            )

            self.calculator.recompute_debt(payment.debt_id)
            self.calculator.recompute_supplier(payment.supplier_id)
            return payment

        payment = run_in_transaction(_work, label="soft_delete_payment")

        logger.info(
            "Payment deleted",
            extra={"payment_id": str(payment.pk), "debt_id": str(payment.debt_id)},
        )
        return payment

    # --------------------------------------------------------
    # PERSISTENCE
    # --------------------------------------------------------

    def _save(self, payment: Payment, update_fields=None) -> None:
        try:
            payment.save(update_fields=update_fields)
        except IntegrityError as exc:
            if payment.confirmation_number and _is_confirmation_conflict(exc):
                logger.error(
                    "Payment rejected by confirmation number constraint",
                    extra={"confirmation_number": payment.confirmation_number},
                )
                raise DuplicateConfirmationError(
                    "A payment with this confirmation number already exists"
                ) from exc
            raise


_manager = PaymentLifecycleManager()


# ============================================================
# MODULE API
# ============================================================


def create_payment(**kwargs) -> Payment:
    return _manager.create(**kwargs)


def update_payment(payment_id, **changes) -> Payment:
    return _manager.update(payment_id, **changes)


def soft_delete_payment(payment_id, *, deleted_by=None, reason: str | None = None) -> Payment:
    return _manager.soft_delete(payment_id, deleted_by=deleted_by, reason=reason)


def get_payment(payment_id, *, include_deleted: bool = False) -> Payment:
    return store.get_payment(payment_id, include_deleted=include_deleted)


def find_zelle_payment(confirmation_suffix: str):
    """Newest active ZELLE payment whose confirmation number ends with the suffix."""
    suffix = (confirmation_suffix or "").strip()
    if not suffix:
        return None

    return (
        Payment.objects.active()
        .filter(
            payment_method=Payment.METHOD_ZELLE,
            confirmation_number__endswith=suffix,
        )
        .select_related("supplier", "created_by")
        .order_by("-created_at")
        .first()
    )


def search_by_confirmation(query: str, *, limit: int = 10) -> list[Payment]:
    query = (query or "").strip()
    if len(query) < MIN_SEARCH_LENGTH:
        return []

    return list(
        Payment.objects.active()
        .filter(
            confirmation_number__isnull=False,
            confirmation_number__contains=query,
        )
        .select_related("supplier", "created_by")
        .order_by("-created_at")[:limit]
    )


def mark_shared(payment_id) -> Payment:
    """Flag a payment as shared with its supplier. No balance effect."""

    def _work():
        payment = store.get_payment(payment_id, include_deleted=False, for_update=True)
        supplier = store.get_supplier(payment.supplier_id)
        if not (supplier.phone or "").strip():
            raise MissingPhoneError("The supplier has no phone number on file")

        payment.shared = True
        payment.shared_at = timezone.now()
        payment.save(update_fields=["shared", "shared_at", "updated_at"])
        return payment

    payment = run_in_transaction(_work, label="mark_payment_shared")
    logger.info("Payment marked as shared", extra={"payment_id": str(payment.pk)})
    return payment
