# payables/serializers/supplier.py

from rest_framework import serializers

from payables.models import Supplier


class SupplierSummarySerializer(serializers.ModelSerializer):
    """Compact supplier block embedded in payment and debt views."""

    class Meta:
        model = Supplier
        fields = [
            "id",
            "company_name",
            "tax_id",
            "phone",
        ]
        read_only_fields = fields


class SupplierReadSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = [
            "id",
            "company_name",
            "tax_id",
            "email",
            "phone",
            "total_debt",
            "status",
            "last_payment_date",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
