# payables/services/report_service.py

"""
PAYABLES REPORTING

Figures consumed by report generators. Layout (PDF/HTML) lives elsewhere.

- Dashboard stats are global counters.
- Supplier report statistics use ACTIVE payments in the date range only;
  its debt listing includes deleted payments for the audit trail.
"""

from decimal import ROUND_HALF_UP, Decimal
import logging

from django.db.models import Count, DecimalField, Sum, Value
from django.db.models.functions import Coalesce

from payables.models import Debt, Payment, Supplier
from payables.services import query_service, store


logger = logging.getLogger("payables.reports")


TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _sum(field: str):
    return Coalesce(
        Sum(field),
        Value(ZERO),
        output_field=DecimalField(max_digits=18, decimal_places=2),
    )


def dashboard_stats() -> dict:
    total_debt = Debt.objects.aggregate(total=_sum("remaining_amount"))["total"]

    return {
        "pending_debts": Debt.objects.filter(status=Debt.STATUS_PENDING).count(),
        "active_payments": Payment.objects.active().count(),
        "total_suppliers": Supplier.objects.count(),
        "total_debt": _money(total_debt),
    }


def supplier_detailed_report(supplier_id, *, start_date=None, end_date=None) -> dict:
    supplier = store.get_supplier(supplier_id)

    payments = query_service.list_payments_for_supplier(
        supplier.pk,
        start_date=start_date,
        end_date=end_date,
        include_deleted=False,
    )
    stats = payments.order_by().aggregate(total=_sum("amount"), count=Count("pk"))

    total_paid = _money(stats["total"])
    payment_count = stats["count"] or 0
    average = _money(total_paid / payment_count) if payment_count else ZERO

    debts = query_service.list_debts_for_supplier(
        supplier.pk, include_deleted_payments=True
    )

    logger.info(
        "Supplier report generated",
        extra={
            "supplier_id": str(supplier.pk),
            "payment_count": payment_count,
            "debt_count": len(debts),
        },
    )

    return {
        "supplier": supplier,
        "total_paid": total_paid,
        "payment_count": payment_count,
        "average_payment": average,
        "debts": debts,
    }
