# payables/services/debt_service.py

"""
DEBT SERVICE

Direct edits of a Debt (initial amount and/or due date).

An initial amount edit is applied as a delta; remaining_amount and status
are then re-derived from active payments and the supplier is recomputed.
"""

import logging

from payables.models import Debt
from payables.services import store
from payables.services.aggregate_service import AggregateCalculator
from payables.services.exceptions import NoChangesError, NotFoundError
from payables.services.order_service import validate_amount
from payables.services.unit_of_work import run_in_transaction


logger = logging.getLogger("payables.debts")


def update_debt(
    debt_id,
    *,
    initial_amount=None,
    due_date=None,
    calculator=None,
) -> Debt:
    calculator = calculator or AggregateCalculator()
    new_initial = (
        validate_amount(initial_amount, label="initial_amount")
        if initial_amount is not None
        else None
    )

    logger.info(
        "Updating debt",
        extra={
            "debt_id": str(debt_id),
            "initial_amount": str(initial_amount) if initial_amount is not None else None,
            "due_date": str(due_date) if due_date is not None else None,
        },
    )

    def _work():
        current = store.get_debt(debt_id)
        store.lock_suppliers([current.supplier_id])
        debt = store.lock_debts([current.pk]).get(str(current.pk))
        if debt is None:
            raise NotFoundError("Debt not found")

        fields = []
        if new_initial is not None and new_initial != debt.initial_amount:
            debt.initial_amount = new_initial
            fields.append("initial_amount")

        if due_date is not None and due_date != debt.due_date:
            debt.due_date = due_date
            fields.append("due_date")

        if not fields:
            raise NoChangesError("No changes to apply to the debt")

        debt.save(update_fields=[*fields, "updated_at"])

        debt = calculator.recompute_debt(debt.pk)
        calculator.recompute_supplier(debt.supplier_id)
        return debt

    debt = run_in_transaction(_work, label="update_debt")

    logger.info(
        "Debt updated",
        extra={
            "debt_id": str(debt.pk),
            "remaining_amount": str(debt.remaining_amount),
            "status": debt.status,
        },
    )
    return debt
