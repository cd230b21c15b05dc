# payables/services/aggregate_service.py

"""
AGGREGATE CALCULATOR

The ONLY writer of derived ledger fields:
- Debt.remaining_amount / Debt.status
- Supplier.total_debt / Supplier.status

Derivation (full recomputation, never incremental):
- remaining = max(0, initial_amount - sum(active payment amounts))
- debt status = PAID when remaining <= 0, else PENDING
- total_debt = sum(max(0, remaining)) over the supplier's debts
- supplier status = PENDING when total_debt > 0, else COMPLETED

Recomputation reads through the caller's transaction, so values written
earlier in the same unit of work are visible. Recomputing twice in a
row writes nothing the second time.
"""

from decimal import ROUND_HALF_UP, Decimal
import logging

from payables.models import Debt, Supplier
from payables.services import store


logger = logging.getLogger("payables.aggregates")


TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


# ============================================================
# PURE DERIVATIONS
# ============================================================


def derive_debt_balance(initial_amount, payment_amounts) -> tuple[Decimal, str]:
    paid = sum((_money(a) for a in payment_amounts), ZERO)
    remaining = _money(initial_amount) - paid

    if remaining <= ZERO:
        return ZERO, Debt.STATUS_PAID
    return remaining, Debt.STATUS_PENDING


def derive_supplier_balance(remaining_amounts) -> tuple[Decimal, str]:
    total = sum((max(ZERO, _money(r)) for r in remaining_amounts), ZERO)

    if total > ZERO:
        return total, Supplier.STATUS_PENDING
    return total, Supplier.STATUS_COMPLETED


# ============================================================
# PERSISTING RECOMPUTATION
# ============================================================


class AggregateCalculator:
    def recompute_debt(self, debt_id) -> Debt:
        debt = store.get_debt(debt_id)
        amounts = store.list_active_payments_for_debt(debt.pk).values_list(
            "amount", flat=True
        )
        remaining, status = derive_debt_balance(debt.initial_amount, amounts)

        if debt.remaining_amount != remaining or debt.status != status:
            logger.info(
                "Debt balance recomputed",
                extra={
                    "debt_id": str(debt.pk),
                    "remaining_before": str(debt.remaining_amount),
                    "remaining_after": str(remaining),
                    "status": status,
                },
            )
            debt.remaining_amount = remaining
            debt.status = status
            debt.save(update_fields=["remaining_amount", "status", "updated_at"])

        return debt

    def recompute_supplier(self, supplier_id) -> Supplier:
        supplier = store.get_supplier(supplier_id)
        remainders = store.list_debts_for_supplier(supplier.pk).values_list(
            "remaining_amount", flat=True
        )
        total, status = derive_supplier_balance(remainders)

        if supplier.total_debt != total or supplier.status != status:
            logger.info(
                "Supplier balance recomputed",
                extra={
                    "supplier_id": str(supplier.pk),
                    "total_before": str(supplier.total_debt),
                    "total_after": str(total),
                    "status": status,
                },
            )
            supplier.total_debt = total
            supplier.status = status
            supplier.save(update_fields=["total_debt", "status", "updated_at"])

        return supplier
