# payables/models/debt.py

import uuid
from decimal import Decimal

from django.db import models

from .order import Order
from .supplier import Supplier


class Debt(models.Model):
    """
    Payable obligation derived 1:1 from an Order.

    DERIVED FIELDS (written only by the aggregate calculator):
    - remaining_amount = max(0, initial_amount - sum of active payment amounts)
    - status = PAID when remaining_amount <= 0, PENDING otherwise

    Never hard-deleted.
    """

    STATUS_PENDING = "PENDING"
    STATUS_PAID = "PAID"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_PAID, "Paid"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.OneToOneField(
        Order,
        on_delete=models.PROTECT,
        related_name="debt",
    )
    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.PROTECT,
        related_name="debts",
    )

    title = models.CharField(max_length=200, null=True, blank=True)

    initial_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    remaining_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING
    )
    due_date = models.DateField()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["due_date", "created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(initial_amount__gt=Decimal("0.00")),
                name="debt_initial_amount_gt_zero",
            ),
            models.CheckConstraint(
                condition=models.Q(remaining_amount__gte=Decimal("0.00")),
                name="debt_remaining_amount_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["supplier", "created_at"], name="payables_de_supplie_9e4a17_idx"),
            models.Index(fields=["status", "due_date"], name="payables_de_status_2f6b83_idx"),
        ]

    @property
    def is_settled(self) -> bool:
        return self.status == self.STATUS_PAID or self.remaining_amount <= Decimal("0.00")

    def __str__(self):
        label = self.title or f"Debt {self.id}"
        return f"{label} ({self.remaining_amount}/{self.initial_amount})"
