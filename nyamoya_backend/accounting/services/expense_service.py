# accounting/services/expense_service.py

"""
MANUAL EXPENSE SERVICE

Responsibilities:
- Validate a manual operating expense (rent, salary, transport, ...)
- Create the immutable Expense row (source=MANUAL)
- Delete a mistyped MANUAL expense

Ledger-emitted expenses are NOT created here:
- "Raw Materials" purchases that enter stock come from materials.services.ledger.restock
- "Wastage" write-offs come from wastage.services.wastage_service

A manual "Raw Materials" entry is allowed (cash purchase consumed immediately,
never booked into stock) and counts as an operating expense in reports.
"""

from __future__ import annotations

import logging
from datetime import date as date_type

from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_date

from accounting.models.expense import Expense
from accounting.services.exceptions import AccountingServiceError, ExpenseLockedError
from audit.services import record_action_on_commit
from contacts.services.contact_service import get_supplier
from costing.lookups import fetch
from costing.money import money_str, require_non_negative, require_text

logger = logging.getLogger(__name__)

MANUAL_CATEGORIES = tuple(
    value for value in Expense.Category.values if value != Expense.Category.WASTAGE
)


def _normalize_category(category) -> str:
    raw = (category or "").strip()
    if not raw:
        return Expense.Category.OPERATING

    for value in Expense.Category.values:
        if raw.lower() == value.lower():
            category = value
            break
    else:
        raise AccountingServiceError(
            f"Invalid category '{raw}'. Use one of: {', '.join(MANUAL_CATEGORIES)}."
        )

    if category == Expense.Category.WASTAGE:
        raise AccountingServiceError(
            "Wastage expenses are created by reporting wastage, not by manual entry."
        )
    return category


def _normalize_expense_date(expense_date) -> date_type:
    if expense_date is None or expense_date == "":
        return timezone.localdate()
    if isinstance(expense_date, date_type):
        return expense_date
    parsed = parse_date(str(expense_date).strip())
    if parsed is None:
        raise AccountingServiceError("expense_date must be a date (YYYY-MM-DD)")
    return parsed


@transaction.atomic
def record_expense(
    *,
    description,
    amount,
    category=None,
    expense_date=None,
    supplier=None,
    user=None,
) -> Expense:
    text = require_text(description, field_name="description")
    amt = require_non_negative(amount, field_name="amount")

    expense = Expense.objects.create(
        description=text,
        category=_normalize_category(category),
        amount=amt,
        expense_date=_normalize_expense_date(expense_date),
        source=Expense.Source.MANUAL,
        supplier=get_supplier(supplier),
        recorded_by=user if getattr(user, "is_authenticated", False) else None,
    )

    record_action_on_commit(
        user,
        "Recorded Expense",
        f"{expense.category}: {expense.description} ({money_str(expense.amount)})",
    )
    return expense


@transaction.atomic
def delete_expense(*, expense, user=None) -> None:
    expense = fetch(Expense, expense, label="Expense")

    if expense.source != Expense.Source.MANUAL:
        raise ExpenseLockedError(
            "Ledger-generated expenses cannot be deleted; they mirror a stock movement."
        )

    summary = f"{expense.category}: {expense.description} ({money_str(expense.amount)})"
    expense.delete()
    logger.info("Deleted manual expense %s", summary)
    record_action_on_commit(user, "Deleted Expense", summary)
