# payables/services/store.py

"""
LEDGER STORE ADAPTER

Row access for the payables services.

RULES:
- Locks are taken Suppliers first, then Debts, each set in primary-key
  order, so concurrent units of work never wait on each other in a cycle.
- Lock helpers only make sense inside run_in_transaction().
- Lookups raise NotFoundError instead of leaking Model.DoesNotExist.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db.models import DecimalField, Sum, Value
from django.db.models.functions import Coalesce

from payables.models import Debt, Order, Payment, Supplier
from payables.services.exceptions import NotFoundError


ZERO = Decimal("0.00")


def _unique_ids(ids) -> list:
    return sorted({str(i) for i in ids if i})


def _get(model, obj_id, *, label: str, for_update: bool = False, queryset=None):
    qs = queryset if queryset is not None else model.objects.all()
    if for_update:
        qs = qs.select_for_update()

    try:
        return qs.get(pk=obj_id)
    except (model.DoesNotExist, ValidationError, ValueError) as exc:
        raise NotFoundError(f"{label} not found") from exc


# ============================================================
# LOCKING
# ============================================================


def lock_suppliers(supplier_ids) -> dict:
    """Lock supplier rows in id order. Returns {str(id): Supplier}."""
    ids = _unique_ids(supplier_ids)
    if not ids:
        return {}

    try:
        rows = list(Supplier.objects.select_for_update().filter(pk__in=ids).order_by("pk"))
    except ValidationError as exc:
        raise NotFoundError("Supplier not found") from exc
    return {str(s.pk): s for s in rows}


def lock_debts(debt_ids) -> dict:
    """Lock debt rows in id order. Returns {str(id): Debt}."""
    ids = _unique_ids(debt_ids)
    if not ids:
        return {}

    try:
        rows = list(Debt.objects.select_for_update().filter(pk__in=ids).order_by("pk"))
    except ValidationError as exc:
        raise NotFoundError("Debt not found") from exc
    return {str(d.pk): d for d in rows}


# ============================================================
# LOOKUPS
# ============================================================


def get_supplier(supplier_id, *, for_update: bool = False) -> Supplier:
    return _get(Supplier, supplier_id, label="Supplier", for_update=for_update)


def get_debt(debt_id, *, for_update: bool = False) -> Debt:
    return _get(Debt, debt_id, label="Debt", for_update=for_update)


def get_order(order_id, *, for_update: bool = False) -> Order:
    return _get(Order, order_id, label="Order", for_update=for_update)


def get_payment(
    payment_id, *, include_deleted: bool = True, for_update: bool = False
) -> Payment:
    qs = Payment.objects.all() if include_deleted else Payment.objects.active()
    return _get(
        Payment,
        payment_id,
        label="Payment",
        for_update=for_update,
        queryset=qs,
    )


def list_active_payments_for_debt(debt_id):
    return Payment.objects.active().filter(debt_id=debt_id).order_by("created_at")


def list_debts_for_supplier(supplier_id):
    return Debt.objects.filter(supplier_id=supplier_id).order_by("created_at", "pk")


# ============================================================
# AGGREGATE READS
# ============================================================


def active_payment_total(debt_id, *, exclude_payment_id=None) -> Decimal:
    qs = Payment.objects.active().filter(debt_id=debt_id)
    if exclude_payment_id:
        qs = qs.exclude(pk=exclude_payment_id)

    total = qs.aggregate(
        total=Coalesce(
            Sum("amount"),
            Value(ZERO),
            output_field=DecimalField(max_digits=14, decimal_places=2),
        )
    )["total"]
    return Decimal(total or ZERO)


def confirmation_in_use(confirmation_number, *, exclude_payment_id=None) -> bool:
    """True when an ACTIVE payment already carries this confirmation number."""
    value = (confirmation_number or "").strip()
    if not value:
        return False

    qs = Payment.objects.active().filter(confirmation_number=value)
    if exclude_payment_id:
        qs = qs.exclude(pk=exclude_payment_id)
    return qs.exists()
