# contacts/services/contact_service.py

from __future__ import annotations

from django.db.models import F
from django.utils import timezone

from audit.services import record_action_on_commit
from contacts.models import Customer, Supplier
from costing.exceptions import ValidationError
from costing.lookups import fetch_optional
from costing.money import require_text


def get_customer(value) -> Customer | None:
    return fetch_optional(Customer, value, label="Customer")


def get_supplier(value) -> Supplier | None:
    return fetch_optional(Supplier, value, label="Supplier")


def create_customer(*, name, phone="", email="", location="", notes="", user=None) -> Customer:
    customer = Customer.objects.create(
        name=require_text(name, field_name="name"),
        phone=(phone or "").strip(),
        email=(email or "").strip(),
        location=(location or "").strip(),
        notes=(notes or "").strip(),
    )
    record_action_on_commit(user, "Created Customer", f"Added customer: {customer.name}")
    return customer


def update_customer(*, customer, user=None, **fields) -> Customer:
    customer = get_customer(customer)
    if customer is None:
        raise ValidationError("customer is required")

    allowed = {"name", "phone", "email", "location", "notes"}
    unknown = set(fields) - allowed
    if unknown:
        raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

    if "name" in fields:
        fields["name"] = require_text(fields["name"], field_name="name")
    for key in allowed - {"name"}:
        if key in fields:
            fields[key] = (fields[key] or "").strip()

    for key, value in fields.items():
        setattr(customer, key, value)
    customer.save(update_fields=[*fields.keys(), "updated_at"])

    record_action_on_commit(user, "Updated Customer", f"Updated customer: {customer.name}")
    return customer


def bump_customer_spend(*, customer: Customer, amount) -> None:
    """
    Must run inside the sale transaction.
    """
    Customer.objects.filter(pk=customer.pk).update(
        total_spent=F("total_spent") + amount,
        last_purchase_at=timezone.now(),
        updated_at=timezone.now(),
    )


def create_supplier(*, name, phone="", category="", notes="", user=None) -> Supplier:
    supplier = Supplier.objects.create(
        name=require_text(name, field_name="name"),
        phone=(phone or "").strip(),
        category=(category or "").strip() or "General",
        notes=(notes or "").strip(),
    )
    record_action_on_commit(user, "Created Supplier", f"Added supplier: {supplier.name} ({supplier.category})")
    return supplier
