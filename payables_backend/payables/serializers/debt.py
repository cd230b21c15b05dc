# payables/serializers/debt.py

from rest_framework import serializers

from payables.models import Debt
from payables.serializers.payment import PaymentReadSerializer
from payables.serializers.supplier import SupplierSummarySerializer


class DebtReadSerializer(serializers.ModelSerializer):
    """
    Read-only debt view.

    debt_number / listed_payments are attached by the query service;
    a bare Debt falls back to its active payments.
    """

    supplier = SupplierSummarySerializer(read_only=True)
    debt_number = serializers.SerializerMethodField()
    payments = serializers.SerializerMethodField()

    class Meta:
        model = Debt
        fields = [
            "id",
            "order",
            "supplier",
            "title",
            "initial_amount",
            "remaining_amount",
            "status",
            "due_date",
            "debt_number",
            "payments",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_debt_number(self, obj):
        return getattr(obj, "debt_number", None)

    def get_payments(self, obj):
        payments = getattr(obj, "listed_payments", None)
        if payments is None:
            payments = obj.payments.active().order_by("-created_at")
        return PaymentReadSerializer(payments, many=True, context=self.context).data
