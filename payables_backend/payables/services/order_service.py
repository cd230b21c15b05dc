# payables/services/order_service.py

"""
ORDER SERVICE

Order intake and after-the-fact order edits.

RULES:
- Each Order owns exactly one Debt, created in the same transaction.
- due_date = dispatch_date + credit_days, copied to the Debt.
- An amount edit shifts Debt.initial_amount by the same delta; remaining
  and status are then re-derived from active payments.
- Supplier aggregates are fully recomputed after every change.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
import logging

from django.conf import settings
from django.utils import timezone

from payables.models import Debt, Order, compute_due_date
from payables.services import store
from payables.services.aggregate_service import AggregateCalculator
from payables.services.exceptions import (
    InvalidAmountError,
    InvalidCreditDaysError,
    NoChangesError,
    NotFoundError,
)
from payables.services.unit_of_work import run_in_transaction


logger = logging.getLogger("payables.orders")


TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")
DEFAULT_MAX_AMOUNT = "999999.99"


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def max_amount() -> Decimal:
    ledger = getattr(settings, "LEDGER", {}) or {}
    return _money(ledger.get("MAX_AMOUNT") or DEFAULT_MAX_AMOUNT)


def validate_amount(value, *, label: str = "amount") -> Decimal:
    """Parse an order/debt amount: > 0 and within the configured ceiling."""
    try:
        amt = _money(value)
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise InvalidAmountError(f"Invalid {label}: {value!r}") from exc

    if amt <= ZERO:
        raise InvalidAmountError(f"{label} must be > 0")

    ceiling = max_amount()
    if amt > ceiling:
        raise InvalidAmountError(f"{label} is too large (maximum {ceiling})")
    return amt


def parse_credit_days(value) -> int:
    try:
        days = int(value or 0)
    except (TypeError, ValueError) as exc:
        raise InvalidCreditDaysError(f"Invalid credit_days: {value!r}") from exc
    if days < 0:
        raise InvalidCreditDaysError("credit_days must be >= 0")
    return days


def _clean_title(value):
    if value is None:
        return None
    return str(value).strip() or None


def create_order_with_debt(
    *,
    supplier,
    amount: Decimal,
    dispatch_date,
    credit_days: int,
    title=None,
    created_by=None,
) -> Order:
    """Insert an Order and its Debt. Caller owns the transaction and locks."""
    due_date = compute_due_date(dispatch_date, credit_days)

    order = Order.objects.create(
        supplier=supplier,
        amount=amount,
        dispatch_date=dispatch_date,
        credit_days=credit_days,
        due_date=due_date,
        created_by=created_by,
    )
    Debt.objects.create(
        order=order,
        supplier=supplier,
        title=_clean_title(title),
        initial_amount=amount,
        remaining_amount=amount,
        status=Debt.STATUS_PENDING,
        due_date=due_date,
    )
    return order


# ============================================================
# CREATE
# ============================================================


def create_order(
    *,
    supplier_id,
    amount,
    dispatch_date=None,
    credit_days=0,
    title=None,
    created_by=None,
    calculator=None,
) -> Order:
    calculator = calculator or AggregateCalculator()
    amt = validate_amount(amount)
    days = parse_credit_days(credit_days)
    dispatch = dispatch_date or timezone.localdate()

    logger.info(
        "Creating order",
        extra={"supplier_id": str(supplier_id), "amount": str(amt)},
    )

    def _work():
        supplier = store.lock_suppliers([supplier_id]).get(str(supplier_id))
        if supplier is None:
            raise NotFoundError("Supplier not found")

        order = create_order_with_debt(
            supplier=supplier,
            amount=amt,
            dispatch_date=dispatch,
            credit_days=days,
            title=title,
            created_by=created_by,
        )
        calculator.recompute_supplier(supplier.pk)
        return order

    order = run_in_transaction(_work, label="create_order")

    logger.info(
        "Order created",
        extra={"order_id": str(order.pk), "supplier_id": str(order.supplier_id)},
    )
    return order


# ============================================================
# UPDATE
# ============================================================


_UNSET = object()


def update_order(
    order_id,
    *,
    dispatch_date=None,
    credit_days=None,
    amount=None,
    title=_UNSET,
    calculator=None,
) -> Order:
    """
    Edit dispatch_date / credit_days / amount / title of an order.

    The Debt follows: due_date re-derived, title copied, and on an amount
    change initial_amount moves by (new - old).
    """

    calculator = calculator or AggregateCalculator()

    logger.info("Updating order", extra={"order_id": str(order_id)})

    def _work():
        current = store.get_order(order_id)
        store.lock_suppliers([current.supplier_id])
        order = store.get_order(order_id, for_update=True)

        try:
            debt = order.debt
        except Debt.DoesNotExist as exc:
            raise NotFoundError("Debt for order not found") from exc
        debt = store.lock_debts([debt.pk])[str(debt.pk)]

        new_dispatch = dispatch_date if dispatch_date is not None else order.dispatch_date
        new_days = parse_credit_days(credit_days) if credit_days is not None else order.credit_days
        new_amount = validate_amount(amount) if amount is not None else order.amount
        new_title = _clean_title(title) if title is not _UNSET else debt.title

        changed = (
            new_dispatch != order.dispatch_date
            or new_days != order.credit_days
            or new_amount != order.amount
            or new_title != debt.title
        )
        if not changed:
            raise NoChangesError("No changes to apply to the order")

        delta = new_amount - order.amount
        new_initial = debt.initial_amount + delta
        if new_initial <= ZERO:
            raise InvalidAmountError("Debt initial amount must stay > 0")

        due_date = compute_due_date(new_dispatch, new_days)

        order.dispatch_date = new_dispatch
        order.credit_days = new_days
        order.amount = new_amount
        order.due_date = due_date
        order.save(
            update_fields=["dispatch_date", "credit_days", "amount", "due_date", "updated_at"]
        )

        debt.due_date = due_date
        debt.title = new_title
        fields = ["due_date", "title", "updated_at"]
        if delta:
            debt.initial_amount = new_initial
            fields.append("initial_amount")
        debt.save(update_fields=fields)

        calculator.recompute_debt(debt.pk)
        calculator.recompute_supplier(order.supplier_id)

        logger.info(
            "Order updated",
            extra={
                "order_id": str(order.pk),
                "amount_delta": str(delta),
                "due_date": str(due_date),
            },
        )
        return order

    return run_in_transaction(_work, label="update_order")
