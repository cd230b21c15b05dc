# payables/models/__init__.py

"""
PAYABLES MODELS PACKAGE EXPORTS

Purpose:
- Central export surface for payables app models.
"""

from .debt import Debt
from .order import Order, compute_due_date
from .payment import Payment, PaymentQuerySet
from .supplier import Supplier

__all__ = [
    "Supplier",
    "Order",
    "Debt",
    "Payment",
    "PaymentQuerySet",
    "compute_due_date",
]
