# payables/admin.py

from django.contrib import admin

from payables.models import Debt, Order, Payment, Supplier


# ======================================================
# SUPPLIER ADMIN
# ======================================================


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = (
        "company_name",
        "tax_id",
        "phone",
        "total_debt",
        "status",
        "last_payment_date",
    )
    # Derived by the aggregate calculator.
    readonly_fields = (
        "total_debt",
        "status",
        "last_payment_date",
        "created_at",
        "updated_at",
    )
    search_fields = ("company_name", "tax_id")
    list_filter = ("status",)


# ======================================================
# ORDER ADMIN
# ======================================================


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "supplier",
        "amount",
        "dispatch_date",
        "credit_days",
        "due_date",
    )
    readonly_fields = (
        "supplier",
        "amount",
        "dispatch_date",
        "credit_days",
        "due_date",
        "created_by",
        "created_at",
        "updated_at",
    )
    search_fields = ("supplier__company_name", "supplier__tax_id")
    list_filter = ("dispatch_date",)


# ======================================================
# DEBT ADMIN
# ======================================================


@admin.register(Debt)
class DebtAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "supplier",
        "title",
        "initial_amount",
        "remaining_amount",
        "status",
        "due_date",
    )
    readonly_fields = (
        "order",
        "supplier",
        "initial_amount",
        "remaining_amount",
        "status",
        "due_date",
        "created_at",
        "updated_at",
    )
    search_fields = ("title", "supplier__company_name")
    list_filter = ("status", "due_date")


# ======================================================
# PAYMENT ADMIN
# ======================================================


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "supplier",
        "amount",
        "payment_method",
        "confirmation_number",
        "payment_date",
        "deleted_at",
    )
    readonly_fields = (
        "debt",
        "supplier",
        "amount",
        "payment_method",
        "confirmation_number",
        "payment_date",
        "receipt_files",
        "created_by",
        "deleted_at",
        "deleted_by",
        "deletion_reason",
        "created_at",
        "updated_at",
    )
    search_fields = ("confirmation_number", "sender_name", "supplier__company_name")
    list_filter = ("payment_method", "verified", "shared", "payment_date")

    # Ledger rows change only through the payment services.
    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
