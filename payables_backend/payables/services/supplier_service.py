# payables/services/supplier_service.py

"""
SUPPLIER SERVICE

Supplier onboarding (optionally with an opening balance) and profile edits.

total_debt / status are derived and are never accepted as input; an
opening balance is recorded as a synthesized Order + Debt so the supplier
aggregate stays a pure function of its debts.
"""

from decimal import Decimal
import logging

from django.db import IntegrityError
from django.utils import timezone

from payables.models import Supplier
from payables.services import store
from payables.services.aggregate_service import AggregateCalculator
from payables.services.exceptions import (
    DuplicateTaxIdError,
    InvalidSupplierError,
    NoChangesError,
    NotFoundError,
)
from payables.services.order_service import (
    create_order_with_debt,
    parse_credit_days,
    validate_amount,
)
from payables.services.unit_of_work import run_in_transaction


logger = logging.getLogger("payables.suppliers")


MIN_COMPANY_NAME_LENGTH = 3
OPENING_BALANCE_TITLE = "Opening balance"


def _clean(value) -> str:
    return str(value or "").strip()


def _validate_company_name(value) -> str:
    name = _clean(value)
    if len(name) < MIN_COMPANY_NAME_LENGTH:
        raise InvalidSupplierError(
            f"company_name must be at least {MIN_COMPANY_NAME_LENGTH} characters"
        )
    return name


def _validate_tax_id(value) -> str:
    tax_id = _clean(value)
    if not tax_id:
        raise InvalidSupplierError("tax_id is required")
    return tax_id


def _save_supplier(supplier: Supplier, **kwargs) -> None:
    try:
        supplier.save(**kwargs)
    except IntegrityError as exc:
        logger.error(
            "Supplier rejected by tax_id constraint",
            extra={"tax_id": supplier.tax_id},
        )
        raise DuplicateTaxIdError("A supplier with this tax id already exists") from exc


# ============================================================
# CREATE
# ============================================================


def create_supplier(
    *,
    company_name: str,
    tax_id: str,
    phone: str = "",
    email: str = "",
    opening_balance=None,
    debt_date=None,
    credit_days=0,
    created_by=None,
    calculator=None,
) -> Supplier:
    calculator = calculator or AggregateCalculator()
    name = _validate_company_name(company_name)
    tax = _validate_tax_id(tax_id)

    opening = None
    if opening_balance not in (None, "", 0, Decimal("0")):
        opening = validate_amount(opening_balance, label="opening_balance")
    days = parse_credit_days(credit_days)

    logger.info(
        "Creating supplier",
        extra={"tax_id": tax, "opening_balance": str(opening) if opening else None},
    )

    def _work():
        if Supplier.objects.filter(tax_id=tax).exists():
            raise DuplicateTaxIdError("A supplier with this tax id already exists")

        supplier = Supplier(
            company_name=name,
            tax_id=tax,
            phone=_clean(phone),
            email=_clean(email),
        )
        _save_supplier(supplier)

        if opening is not None:
            create_order_with_debt(
                supplier=supplier,
                amount=opening,
                dispatch_date=debt_date or timezone.localdate(),
                credit_days=days,
                title=OPENING_BALANCE_TITLE,
                created_by=created_by,
            )

        return calculator.recompute_supplier(supplier.pk)

    supplier = run_in_transaction(_work, label="create_supplier")

    logger.info(
        "Supplier created",
        extra={"supplier_id": str(supplier.pk), "total_debt": str(supplier.total_debt)},
    )
    return supplier


# ============================================================
# UPDATE (profile only)
# ============================================================


def update_supplier(
    supplier_id,
    *,
    company_name=None,
    tax_id=None,
    phone=None,
    email=None,
) -> Supplier:
    def _work():
        supplier = store.lock_suppliers([supplier_id]).get(str(supplier_id))
        if supplier is None:
            raise NotFoundError("Supplier not found")

        fields = []

        if company_name is not None:
            name = _validate_company_name(company_name)
            if name != supplier.company_name:
                supplier.company_name = name
                fields.append("company_name")

        if tax_id is not None:
            tax = _validate_tax_id(tax_id)
            if tax != supplier.tax_id:
                if Supplier.objects.filter(tax_id=tax).exclude(pk=supplier.pk).exists():
                    raise DuplicateTaxIdError("A supplier with this tax id already exists")
                supplier.tax_id = tax
                fields.append("tax_id")

        if phone is not None and _clean(phone) != supplier.phone:
            supplier.phone = _clean(phone)
            fields.append("phone")

        if email is not None and _clean(email) != supplier.email:
            supplier.email = _clean(email)
            fields.append("email")

        if not fields:
            raise NoChangesError("No changes to apply to the supplier")

        _save_supplier(supplier, update_fields=[*fields, "updated_at"])
        return supplier

    supplier = run_in_transaction(_work, label="update_supplier")
    logger.info("Supplier updated", extra={"supplier_id": str(supplier.pk)})
    return supplier
