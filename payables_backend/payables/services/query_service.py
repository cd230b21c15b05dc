# payables/services/query_service.py

"""
LEDGER READ QUERIES

Read-only listings consumed by the presentation layer and report
generators. Active payments only unless deleted ones are asked for.

debt_number: 1-based position of a debt among ALL of its supplier's debts
ordered by creation time (stable regardless of listing filters).
"""

from django.db.models import Prefetch

from payables.models import Debt, Payment
from payables.services import store


def _payments_queryset(*, include_deleted: bool):
    qs = Payment.objects.all() if include_deleted else Payment.objects.active()
    return qs.select_related("deleted_by", "created_by").order_by("-created_at")


def debt_numbers(supplier_id) -> dict:
    ids = store.list_debts_for_supplier(supplier_id).values_list("pk", flat=True)
    return {str(pk): position for position, pk in enumerate(ids, start=1)}


def list_debts_for_supplier(
    supplier_id,
    *,
    status: str | None = None,
    start_date=None,
    end_date=None,
    include_deleted_payments: bool = False,
) -> list[Debt]:
    """
    Debts of one supplier ordered by due date.

    Each debt carries:
    - debt_number
    - listed_payments (active only unless include_deleted_payments)
    """

    supplier = store.get_supplier(supplier_id)

    qs = Debt.objects.filter(supplier=supplier)
    if status:
        qs = qs.filter(status=status)
    if start_date:
        qs = qs.filter(due_date__gte=start_date)
    if end_date:
        qs = qs.filter(due_date__lte=end_date)

    qs = (
        qs.select_related("supplier", "order")
        .prefetch_related(
            Prefetch(
                "payments",
                queryset=_payments_queryset(include_deleted=include_deleted_payments),
                to_attr="listed_payments",
            )
        )
        .order_by("due_date", "created_at")
    )

    numbers = debt_numbers(supplier.pk)
    debts = list(qs)
    for debt in debts:
        debt.debt_number = numbers.get(str(debt.pk), 0)
    return debts


def get_debt(debt_id, *, include_deleted_payments: bool = False) -> Debt:
    debt = store.get_debt(debt_id)
    debt.listed_payments = list(
        _payments_queryset(include_deleted=include_deleted_payments).filter(debt=debt)
    )
    debt.debt_number = debt_numbers(debt.supplier_id).get(str(debt.pk), 0)
    return debt


def list_payments_for_debt(debt_id, *, include_deleted: bool = False) -> list[Payment]:
    debt = store.get_debt(debt_id)
    return list(_payments_queryset(include_deleted=include_deleted).filter(debt=debt))


def list_payments_for_supplier(
    supplier_id,
    *,
    start_date=None,
    end_date=None,
    include_deleted: bool = False,
):
    supplier = store.get_supplier(supplier_id)

    qs = _payments_queryset(include_deleted=include_deleted).filter(supplier=supplier)
    if start_date:
        qs = qs.filter(payment_date__gte=start_date)
    if end_date:
        qs = qs.filter(payment_date__lte=end_date)
    return qs
