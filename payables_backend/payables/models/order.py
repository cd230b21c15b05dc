# payables/models/order.py

import uuid
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.db import models

from .supplier import Supplier

User = settings.AUTH_USER_MODEL


def compute_due_date(dispatch_date, credit_days):
    """due_date = dispatch_date + credit_days (calendar days)."""
    return dispatch_date + timedelta(days=int(credit_days or 0))


class Order(models.Model):
    """
    Dispatch of goods/services that creates an obligation.

    Exactly one Debt is created per Order, in the same transaction.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.PROTECT,
        related_name="orders",
    )

    amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    dispatch_date = models.DateField()
    credit_days = models.PositiveIntegerField(default=0)
    due_date = models.DateField()

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payable_orders_created",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-dispatch_date", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=Decimal("0.00")),
                name="payable_order_amount_gt_zero",
            ),
        ]
        indexes = [
            models.Index(
                fields=["supplier", "dispatch_date"], name="payables_or_supplie_5b0c41_idx"
            ),
        ]

    def __str__(self):
        return f"Order {self.id} ({self.amount})"
