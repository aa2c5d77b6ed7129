# costing/api.py

"""
ERROR -> HTTP MAPPING (shared by every ledger view)

ValidationError          400
NotFoundError            404
InsufficientStockError   409
ConcurrencyConflictError 409
StoreUnavailableError    503

uuid_query_param() guards list filters: a malformed id is a 400, not a 500.
"""

from __future__ import annotations

import uuid

from rest_framework import serializers, status
from rest_framework.response import Response

from costing.exceptions import (
    ConcurrencyConflictError,
    CostingError,
    InsufficientStockError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)


STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST, "validation_error"),
    (NotFoundError, status.HTTP_404_NOT_FOUND, "not_found"),
    (InsufficientStockError, status.HTTP_409_CONFLICT, "insufficient_stock"),
    (ConcurrencyConflictError, status.HTTP_409_CONFLICT, "concurrency_conflict"),
    (StoreUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE, "store_unavailable"),
)


def error_response(exc: CostingError) -> Response:
    for error_cls, http_status, code in STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return Response({"detail": str(exc), "code": code}, status=http_status)
    return Response(
        {"detail": str(exc), "code": "costing_error"},
        status=status.HTTP_400_BAD_REQUEST,
    )


def uuid_query_param(params, name: str):
    raw = (params.get(name) or "").strip()
    if not raw:
        return None
    try:
        return uuid.UUID(raw)
    except ValueError as exc:
        raise serializers.ValidationError({name: "Must be a valid UUID."}) from exc
