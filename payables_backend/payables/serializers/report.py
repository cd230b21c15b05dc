# payables/serializers/report.py

from rest_framework import serializers

from payables.serializers.debt import DebtReadSerializer
from payables.serializers.supplier import SupplierReadSerializer


class DashboardStatsSerializer(serializers.Serializer):
    pending_debts = serializers.IntegerField(read_only=True)
    active_payments = serializers.IntegerField(read_only=True)
    total_suppliers = serializers.IntegerField(read_only=True)
    total_debt = serializers.DecimalField(max_digits=18, decimal_places=2, read_only=True)


class SupplierReportSerializer(serializers.Serializer):
    """Shape of report_service.supplier_detailed_report() for report generators."""

    supplier = SupplierReadSerializer(read_only=True)
    total_paid = serializers.DecimalField(max_digits=18, decimal_places=2, read_only=True)
    payment_count = serializers.IntegerField(read_only=True)
    average_payment = serializers.DecimalField(
        max_digits=18, decimal_places=2, read_only=True
    )
    debts = DebtReadSerializer(many=True, read_only=True)
