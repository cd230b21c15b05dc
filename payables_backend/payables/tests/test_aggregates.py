# payables/tests/test_aggregates.py

from datetime import date
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from payables.models import Debt, Payment, Supplier
from payables.services.aggregate_service import (
    AggregateCalculator,
    derive_debt_balance,
    derive_supplier_balance,
)
from payables.services.exceptions import NotFoundError
from payables.tests.factories import make_debt, make_supplier, refresh


class DerivationTests(TestCase):
    """
    Pure balance derivations.

    GUARANTEES:
    - remaining never negative
    - PAID iff remaining <= 0
    - supplier total ignores negative remainders
    """

    def test_remaining_is_initial_minus_payments(self):
        remaining, status = derive_debt_balance(
            Decimal("1250.00"), [Decimal("250.00"), Decimal("100.50")]
        )
        self.assertEqual(remaining, Decimal("899.50"))
        self.assertEqual(status, Debt.STATUS_PENDING)

    def test_exact_payment_settles_debt(self):
        remaining, status = derive_debt_balance(Decimal("100.00"), [Decimal("100.00")])
        self.assertEqual(remaining, Decimal("0.00"))
        self.assertEqual(status, Debt.STATUS_PAID)

    def test_overpaid_debt_clamps_to_zero(self):
        """A shrunken initial amount below what was paid never goes negative."""
        remaining, status = derive_debt_balance(Decimal("50.00"), [Decimal("80.00")])
        self.assertEqual(remaining, Decimal("0.00"))
        self.assertEqual(status, Debt.STATUS_PAID)

    def test_no_payments(self):
        self.assertEqual(
            derive_debt_balance(Decimal("10.00"), []),
            (Decimal("10.00"), Debt.STATUS_PENDING),
        )

    def test_supplier_total_sums_positive_remainders(self):
        total, status = derive_supplier_balance(
            [Decimal("100.00"), Decimal("0.00"), Decimal("-5.00"), Decimal("20.25")]
        )
        self.assertEqual(total, Decimal("120.25"))
        self.assertEqual(status, Supplier.STATUS_PENDING)

    def test_supplier_without_debt_is_completed(self):
        self.assertEqual(
            derive_supplier_balance([]),
            (Decimal("0.00"), Supplier.STATUS_COMPLETED),
        )


class AggregateCalculatorTests(TestCase):
    def setUp(self):
        self.calculator = AggregateCalculator()
        self.supplier = make_supplier()
        self.debt = make_debt(self.supplier, "500.00")

    def _raw_payment(self, amount, **kwargs):
        # Bypasses the lifecycle manager to simulate drifted stored aggregates.
        return Payment.objects.create(
            debt=self.debt,
            supplier=self.supplier,
            amount=Decimal(amount),
            payment_method=Payment.METHOD_CASH,
            sender_name="Caja",
            payment_date=date(2024, 3, 5),
            **kwargs,
        )

    def test_recompute_debt_uses_active_payments_only(self):
        self._raw_payment("200.00")
        self._raw_payment("150.00", deleted_at=timezone.now())

        debt = self.calculator.recompute_debt(self.debt.pk)

        self.assertEqual(debt.remaining_amount, Decimal("300.00"))
        self.assertEqual(debt.status, Debt.STATUS_PENDING)

    def test_recompute_supplier_matches_sum_of_debts(self):
        other = make_debt(self.supplier, "75.00")
        self._raw_payment("500.00")
        self.calculator.recompute_debt(self.debt.pk)

        supplier = self.calculator.recompute_supplier(self.supplier.pk)

        refresh(other)
        self.assertEqual(supplier.total_debt, other.remaining_amount)
        self.assertEqual(supplier.total_debt, Decimal("75.00"))
        self.assertEqual(supplier.status, Supplier.STATUS_PENDING)

    def test_recompute_is_idempotent(self):
        self._raw_payment("125.00")

        first = self.calculator.recompute_debt(self.debt.pk)
        first_updated = first.updated_at
        second = self.calculator.recompute_debt(self.debt.pk)

        self.assertEqual(first.remaining_amount, second.remaining_amount)
        self.assertEqual(first.status, second.status)
        self.assertEqual(second.updated_at, first_updated)

        s1 = self.calculator.recompute_supplier(self.supplier.pk)
        s2 = self.calculator.recompute_supplier(self.supplier.pk)
        self.assertEqual((s1.total_debt, s1.status), (s2.total_debt, s2.status))

    def test_missing_rows_raise_not_found(self):
        with self.assertRaises(NotFoundError):
            self.calculator.recompute_debt("00000000-0000-0000-0000-000000000000")
        with self.assertRaises(NotFoundError):
            self.calculator.recompute_supplier("not-a-uuid")
