# payables/tests/factories.py

from datetime import date
from decimal import Decimal
import itertools

from django.contrib.auth import get_user_model

from payables.services.order_service import create_order
from payables.services.supplier_service import create_supplier

User = get_user_model()

_seq = itertools.count(1)


# -----------------------------
# Ledger seeding helpers
# -----------------------------


def make_user(username=None):
    n = next(_seq)
    return User.objects.create_user(
        username=username or f"cashier{n}",
        email=f"cashier{n}@example.com",
        password="password123",
    )


def make_supplier(*, company_name=None, phone="+584141234567", **kwargs):
    n = next(_seq)
    return create_supplier(
        company_name=company_name or f"Distribuidora {n}",
        tax_id=kwargs.pop("tax_id", f"J-{n:08d}-0"),
        phone=phone,
        **kwargs,
    )


def make_debt(supplier, amount="1250.00", *, credit_days=30, title=None, dispatch_date=None):
    order = create_order(
        supplier_id=supplier.pk,
        amount=Decimal(amount),
        dispatch_date=dispatch_date or date(2024, 3, 1),
        credit_days=credit_days,
        title=title,
    )
    return order.debt


def refresh(*objs):
    for obj in objs:
        obj.refresh_from_db()
