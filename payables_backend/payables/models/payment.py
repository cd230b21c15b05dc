# payables/models/payment.py

"""
PAYMENT (APPEND-MOSTLY, SOFT-DELETED)

Purpose:
- Remittance recorded against a Debt.
- Retraction is a tombstone (deleted_at / deleted_by / deletion_reason);
  the row is retained for audit and filtered out via Payment.objects.active().

Constraints:
- amount > 0
- confirmation_number unique among ACTIVE payments (partial unique index);
  this is the authoritative duplicate guard, services only pre-check it.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from .debt import Debt
from .supplier import Supplier

User = settings.AUTH_USER_MODEL


class PaymentQuerySet(models.QuerySet):
    def active(self):
        return self.filter(deleted_at__isnull=True)


class Payment(models.Model):
    METHOD_ZELLE = "ZELLE"
    METHOD_TRANSFER = "TRANSFER"
    METHOD_CASH = "CASH"

    METHODS = [
        (METHOD_ZELLE, "Zelle"),
        (METHOD_TRANSFER, "Transfer"),
        (METHOD_CASH, "Cash"),
    ]

    # Methods that must carry a bank confirmation number.
    CONFIRMED_METHODS = frozenset({METHOD_ZELLE, METHOD_TRANSFER})

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    debt = models.ForeignKey(
        Debt,
        on_delete=models.PROTECT,
        related_name="payments",
    )
    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.PROTECT,
        related_name="payments",
    )

    amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    payment_method = models.CharField(max_length=20, choices=METHODS)

    sender_name = models.CharField(max_length=200)
    sender_email = models.EmailField(null=True, blank=True)
    confirmation_number = models.CharField(max_length=128, null=True, blank=True)
    payment_date = models.DateField()

    exchange_rate = models.DecimalField(
        max_digits=14, decimal_places=4, null=True, blank=True
    )
    amount_in_bolivares = models.DecimalField(
        max_digits=18, decimal_places=2, null=True, blank=True
    )

    # Ordered list of stored receipt file names (names only, never paths).
    receipt_files = models.JSONField(default=list, blank=True)

    verified = models.BooleanField(default=False)
    shared = models.BooleanField(default=False)
    shared_at = models.DateTimeField(null=True, blank=True)

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payable_payments_created",
    )

    deleted_at = models.DateTimeField(null=True, blank=True)
    deleted_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payable_payments_deleted",
    )
    deletion_reason = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PaymentQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=Decimal("0.00")),
                name="payable_payment_amount_gt_zero",
            ),
            models.UniqueConstraint(
                fields=["confirmation_number"],
                condition=models.Q(deleted_at__isnull=True)
                & models.Q(confirmation_number__isnull=False),
                name="uniq_active_payment_confirmation_number",
            ),
        ]
        indexes = [
            models.Index(fields=["debt", "deleted_at"], name="payables_pa_debt_id_7a2c55_idx"),
            models.Index(
                fields=["supplier", "payment_date"], name="payables_pa_supplie_c81d0e_idx"
            ),
            models.Index(
                fields=["confirmation_number"], name="payables_pa_confirm_4e93b6_idx"
            ),
        ]

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None

    def clean(self):
        if self.payment_method not in {m for m, _ in self.METHODS}:
            raise ValidationError({"payment_method": "Invalid payment_method"})

        if self.amount is not None and self.amount <= Decimal("0.00"):
            raise ValidationError({"amount": "amount must be > 0"})

        if self.payment_method in self.CONFIRMED_METHODS and not (
            self.confirmation_number or ""
        ).strip():
            raise ValidationError(
                {"confirmation_number": "confirmation_number is required for this method"}
            )

        if self.debt_id and self.supplier_id and self.debt.supplier_id != self.supplier_id:
            raise ValidationError({"supplier": "Debt does not belong to this supplier"})

    def save(self, *args, **kwargs):
        if self.confirmation_number is not None:
            self.confirmation_number = self.confirmation_number.strip() or None
        if self.sender_name is not None:
            self.sender_name = self.sender_name.strip()
        return super().save(*args, **kwargs)

    def __str__(self):
        state = "" if self.is_active else " [deleted]"
        return f"{self.payment_method} {self.amount} -> {self.debt_id}{state}"
