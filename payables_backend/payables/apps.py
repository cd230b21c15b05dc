# payables/apps.py

"""
PAYABLES APP CONFIG

Supplier payables ledger:
- Suppliers, orders and the debt each order creates
- Payments against debts (soft-deleted, never removed)
- Derived balances kept consistent by the aggregate calculator
"""

from django.apps import AppConfig


class PayablesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "payables"
    verbose_name = "Supplier Payables"
