# payables/models/supplier.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


class Supplier(models.Model):
    """
    Counterparty the business owes money to.

    DERIVED FIELDS (written only by the aggregate calculator):
    - total_debt = sum of max(0, remaining_amount) over the supplier's debts
    - status = PENDING while total_debt > 0, COMPLETED otherwise
    """

    STATUS_PENDING = "PENDING"
    STATUS_COMPLETED = "COMPLETED"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_COMPLETED, "Completed"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    company_name = models.CharField(max_length=200)
    tax_id = models.CharField(max_length=64, unique=True)
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")

    total_debt = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_COMPLETED
    )
    last_payment_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["company_name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_debt__gte=Decimal("0.00")),
                name="supplier_total_debt_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["company_name"], name="payables_su_company_8d1f2a_idx"),
            models.Index(fields=["status"], name="payables_su_status_3c7e90_idx"),
        ]

    def clean(self):
        if not (self.company_name or "").strip():
            raise ValidationError({"company_name": "company_name is required"})

        if not (self.tax_id or "").strip():
            raise ValidationError({"tax_id": "tax_id is required"})

    def save(self, *args, **kwargs):
        if self.company_name is not None:
            self.company_name = self.company_name.strip()
        if self.tax_id is not None:
            self.tax_id = self.tax_id.strip()
        if self.phone is not None:
            self.phone = self.phone.strip()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.company_name} ({self.tax_id})"
