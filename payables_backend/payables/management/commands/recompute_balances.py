# payables/management/commands/recompute_balances.py

from __future__ import annotations

from django.core.management.base import BaseCommand

from payables.models import Supplier
from payables.services import store
from payables.services.aggregate_service import (
    AggregateCalculator,
    derive_debt_balance,
    derive_supplier_balance,
)
from payables.services.unit_of_work import run_in_transaction


class Command(BaseCommand):
    help = "Recompute every debt and supplier balance from active payments and report drift."

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report drift without saving.",
        )

    def handle(self, *args, **options):
        dry_run = bool(options.get("dry_run"))
        calculator = AggregateCalculator()

        drifted_debts = 0
        drifted_suppliers = 0

        self.stdout.write("Recomputing payables balances...")
        if dry_run:
            self.stdout.write("DRY RUN: no database changes will be saved.\n")

        supplier_ids = list(Supplier.objects.order_by("pk").values_list("pk", flat=True))

        for supplier_id in supplier_ids:

            def _work(supplier_id=supplier_id):
                supplier = store.lock_suppliers([supplier_id]).get(str(supplier_id))
                if supplier is None:
                    return 0, 0

                debts = store.lock_debts(
                    store.list_debts_for_supplier(supplier.pk).values_list("pk", flat=True)
                )

                debt_drift = 0
                remainders = []
                for debt in debts.values():
                    amounts = store.list_active_payments_for_debt(debt.pk).values_list(
                        "amount", flat=True
                    )
                    remaining, status = derive_debt_balance(debt.initial_amount, amounts)
                    remainders.append(remaining)

                    if remaining != debt.remaining_amount or status != debt.status:
                        debt_drift += 1
                        self.stdout.write(
                            f"DEBT     {debt.pk}: {debt.remaining_amount}/{debt.status} "
                            f"-> {remaining}/{status}"
                        )
                        if not dry_run:
                            calculator.recompute_debt(debt.pk)

                total, status = derive_supplier_balance(remainders)
                supplier_drift = 0
                if total != supplier.total_debt or status != supplier.status:
                    supplier_drift = 1
                    self.stdout.write(
                        f"SUPPLIER {supplier.company_name}: {supplier.total_debt}/{supplier.status} "
                        f"-> {total}/{status}"
                    )
                    if not dry_run:
                        calculator.recompute_supplier(supplier.pk)

                return debt_drift, supplier_drift

            debt_drift, supplier_drift = run_in_transaction(_work, label="recompute_balances")
            drifted_debts += debt_drift
            drifted_suppliers += supplier_drift

        self.stdout.write("\n--- Summary ---")
        self.stdout.write(f"Suppliers checked: {len(supplier_ids)}")
        self.stdout.write(f"Debts drifted:     {drifted_debts}")
        self.stdout.write(f"Suppliers drifted: {drifted_suppliers}")

        if dry_run:
            self.stdout.write("\nDRY RUN complete (no changes saved).")
