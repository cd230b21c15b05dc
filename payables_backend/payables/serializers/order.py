# payables/serializers/order.py

from rest_framework import serializers

from payables.models import Debt, Order


class OrderReadSerializer(serializers.ModelSerializer):
    """
    Read-only order view.

    title lives on the Debt; it is surfaced here for convenience.
    """

    debt_id = serializers.SerializerMethodField()
    title = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "supplier",
            "amount",
            "dispatch_date",
            "credit_days",
            "due_date",
            "debt_id",
            "title",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def _debt(self, obj):
        try:
            return obj.debt
        except Debt.DoesNotExist:
            return None

    def get_debt_id(self, obj):
        debt = self._debt(obj)
        return str(debt.pk) if debt else None

    def get_title(self, obj):
        debt = self._debt(obj)
        return debt.title if debt else None
