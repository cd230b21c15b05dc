# payables/serializers/payment.py

from rest_framework import serializers

from payables.models import Payment
from payables.serializers.supplier import SupplierSummarySerializer


class PaymentReadSerializer(serializers.ModelSerializer):
    """
    Read-only payment view.

    Includes the retraction marker so audit views can render
    deleted payments alongside active ones.
    """

    supplier = SupplierSummarySerializer(read_only=True)
    is_active = serializers.BooleanField(read_only=True)
    deleted_by_username = serializers.SerializerMethodField()

    class Meta:
        model = Payment
        fields = [
            "id",
            "debt",
            "supplier",
            "amount",
            "payment_method",
            "sender_name",
            "sender_email",
            "confirmation_number",
            "payment_date",
            "exchange_rate",
            "amount_in_bolivares",
            "receipt_files",
            "verified",
            "shared",
            "shared_at",
            "created_by",
            "is_active",
            "deleted_at",
            "deleted_by",
            "deleted_by_username",
            "deletion_reason",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_deleted_by_username(self, obj):
        user = obj.deleted_by
        return user.get_username() if user else None
