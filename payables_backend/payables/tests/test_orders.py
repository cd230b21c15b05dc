# payables/tests/test_orders.py

from datetime import date
from decimal import Decimal

from django.test import TestCase, override_settings

from payables.models import Debt, Order, Payment, Supplier
from payables.services.debt_service import update_debt
from payables.services.exceptions import (
    InvalidAmountError,
    InvalidCreditDaysError,
    NoChangesError,
    NotFoundError,
)
from payables.services.order_service import create_order, update_order
from payables.services.payment_service import create_payment
from payables.tests.factories import make_debt, make_supplier, refresh


def _cash(debt, amount):
    return create_payment(
        debt_id=debt.pk,
        supplier_id=debt.supplier_id,
        amount=Decimal(amount),
        payment_method=Payment.METHOD_CASH,
        sender_name="Caja",
        payment_date=date(2024, 3, 10),
    )


class OrderCreateTests(TestCase):
    def setUp(self):
        self.supplier = make_supplier()

    def test_order_creates_pending_debt(self):
        order = create_order(
            supplier_id=self.supplier.pk,
            amount="1250.00",
            dispatch_date=date(2024, 3, 1),
            credit_days=15,
            title="  Lote de harina  ",
        )

        debt = order.debt
        self.assertEqual(order.due_date, date(2024, 3, 16))
        self.assertEqual(debt.due_date, date(2024, 3, 16))
        self.assertEqual(debt.initial_amount, Decimal("1250.00"))
        self.assertEqual(debt.remaining_amount, Decimal("1250.00"))
        self.assertEqual(debt.status, Debt.STATUS_PENDING)
        self.assertEqual(debt.title, "Lote de harina")

        refresh(self.supplier)
        self.assertEqual(self.supplier.total_debt, Decimal("1250.00"))
        self.assertEqual(self.supplier.status, Supplier.STATUS_PENDING)

    def test_amount_bounds(self):
        for amount in ("0", "-1", "1000000.00", "abc"):
            with self.assertRaises(InvalidAmountError):
                create_order(supplier_id=self.supplier.pk, amount=amount)
        self.assertFalse(Order.objects.exists())

    def test_credit_days_must_be_a_non_negative_integer(self):
        for days in ("abc", -1):
            with self.assertRaises(InvalidCreditDaysError) as ctx:
                create_order(supplier_id=self.supplier.pk, amount="10.00", credit_days=days)
            self.assertEqual(ctx.exception.code, "INVALID_CREDIT_DAYS")
        self.assertFalse(Order.objects.exists())

    @override_settings(LEDGER={"MAX_TRANSACTION_ATTEMPTS": 3, "MAX_AMOUNT": "100.00"})
    def test_amount_ceiling_is_configurable(self):
        with self.assertRaises(InvalidAmountError):
            create_order(supplier_id=self.supplier.pk, amount="100.01")

    def test_unknown_supplier(self):
        with self.assertRaises(NotFoundError):
            create_order(
                supplier_id="00000000-0000-0000-0000-000000000000", amount="10.00"
            )


class OrderUpdateTests(TestCase):
    """
    Order edits propagate to the debt and supplier.

    GUARANTEES:
    - amount delta moves initial and remaining together
    - due_date stays dispatch_date + credit_days on order and debt
    - supplier total stays the sum of its debts
    """

    def setUp(self):
        self.supplier = make_supplier()
        self.debt = make_debt(self.supplier, "1250.00", credit_days=30)
        self.order = self.debt.order

    def test_amount_increase_applies_delta(self):
        """1250.00 -> 1400.00 with 1000.00 remaining -> 1150.00 remaining."""
        _cash(self.debt, "250.00")
        refresh(self.supplier)
        total_before = self.supplier.total_debt

        update_order(self.order.pk, amount="1400.00")

        refresh(self.debt, self.supplier, self.order)
        self.assertEqual(self.order.amount, Decimal("1400.00"))
        self.assertEqual(self.debt.initial_amount, Decimal("1400.00"))
        self.assertEqual(self.debt.remaining_amount, Decimal("1150.00"))
        self.assertEqual(self.supplier.total_debt, total_before + Decimal("150.00"))

    def test_amount_decrease_below_paid_settles_debt(self):
        _cash(self.debt, "1000.00")

        update_order(self.order.pk, amount="900.00")

        refresh(self.debt, self.supplier)
        self.assertEqual(self.debt.remaining_amount, Decimal("0.00"))
        self.assertEqual(self.debt.status, Debt.STATUS_PAID)
        self.assertEqual(self.supplier.total_debt, Decimal("0.00"))
        self.assertEqual(self.supplier.status, Supplier.STATUS_COMPLETED)

    def test_schedule_change_rederives_due_date(self):
        update_order(self.order.pk, dispatch_date=date(2024, 4, 1), credit_days=10)

        refresh(self.debt, self.order)
        self.assertEqual(self.order.due_date, date(2024, 4, 11))
        self.assertEqual(self.debt.due_date, date(2024, 4, 11))
        self.assertEqual(self.debt.initial_amount, Decimal("1250.00"))

    def test_title_is_copied_to_debt(self):
        update_order(self.order.pk, title="Factura 0042")
        refresh(self.debt)
        self.assertEqual(self.debt.title, "Factura 0042")

        update_order(self.order.pk, title=None)
        refresh(self.debt)
        self.assertIsNone(self.debt.title)

    def test_no_changes(self):
        with self.assertRaises(NoChangesError):
            update_order(
                self.order.pk,
                amount="1250.00",
                dispatch_date=self.order.dispatch_date,
                credit_days=30,
            )

    def test_invalid_amount(self):
        with self.assertRaises(InvalidAmountError):
            update_order(self.order.pk, amount="0")
        with self.assertRaises(InvalidAmountError):
            update_order(self.order.pk, amount="999999.999")

    def test_rejects_negative_credit_days(self):
        with self.assertRaises(InvalidCreditDaysError):
            update_order(self.order.pk, credit_days=-5)

    def test_unknown_order(self):
        with self.assertRaises(NotFoundError):
            update_order("00000000-0000-0000-0000-000000000000", amount="5.00")


class DebtUpdateTests(TestCase):
    def setUp(self):
        self.supplier = make_supplier()
        self.debt = make_debt(self.supplier, "500.00")

    def test_initial_amount_change(self):
        _cash(self.debt, "100.00")

        debt = update_debt(self.debt.pk, initial_amount="800.00")

        self.assertEqual(debt.initial_amount, Decimal("800.00"))
        self.assertEqual(debt.remaining_amount, Decimal("700.00"))
        refresh(self.supplier)
        self.assertEqual(self.supplier.total_debt, Decimal("700.00"))

    def test_shrinking_to_paid_amount_settles(self):
        _cash(self.debt, "300.00")

        debt = update_debt(self.debt.pk, initial_amount="300.00")

        self.assertEqual(debt.status, Debt.STATUS_PAID)
        refresh(self.supplier)
        self.assertEqual(self.supplier.status, Supplier.STATUS_COMPLETED)

    def test_due_date_only(self):
        debt = update_debt(self.debt.pk, due_date=date(2025, 1, 31))
        self.assertEqual(debt.due_date, date(2025, 1, 31))
        self.assertEqual(debt.remaining_amount, Decimal("500.00"))

    def test_validation(self):
        with self.assertRaises(NoChangesError):
            update_debt(self.debt.pk, initial_amount="500.00")
        with self.assertRaises(InvalidAmountError):
            update_debt(self.debt.pk, initial_amount="1000000")
        with self.assertRaises(InvalidAmountError):
            update_debt(self.debt.pk, initial_amount="-3")
        with self.assertRaises(NotFoundError):
            update_debt("00000000-0000-0000-0000-000000000000", due_date=date(2025, 1, 1))
