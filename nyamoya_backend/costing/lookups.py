# costing/lookups.py

from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError

from costing.exceptions import NotFoundError


def fetch(model, value, *, label: str | None = None):
    """
    Resolve an instance or primary key to a fresh row.

    Unknown or malformed ids both surface as NotFoundError.
    """
    label = label or model.__name__
    pk = getattr(value, "pk", value)
    if pk is None or pk == "":
        raise NotFoundError(f"{label} is required")
    try:
        return model.objects.get(pk=pk)
    except (model.DoesNotExist, DjangoValidationError, ValueError, TypeError) as exc:
        raise NotFoundError(f"{label} {pk} not found") from exc


def fetch_optional(model, value, *, label: str | None = None):
    if value is None or value == "":
        return None
    return fetch(model, value, label=label)
