# costing/concurrency.py

"""
OPTIMISTIC TRANSACTION RUNNER

Every ledger-mutating operation (restock, production, sale, wastage) runs as:

    snapshot = read()                 # plain reads, no locks
    with transaction.atomic():
        write(snapshot)               # versioned compare-and-swap writes

Each ledger row carries a `version`. compare_and_swap() only updates the row
when the version still matches the snapshot; otherwise it raises
ConcurrencyConflictError, the atomic block rolls back EVERY document touched by
the attempt, and the runner re-reads and tries again (bounded).

Store failures are never retried here: a mutation that failed halfway on the
network must surface to the caller instead of risking a double deduction.
Replays are handled by operation_id instead (see replay_or_run).
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from costing.exceptions import ConcurrencyConflictError, StoreUnavailableError

logger = logging.getLogger("costing")

DEFAULT_MAX_RETRIES = 3


def max_attempts() -> int:
    raw = getattr(settings, "COSTING_MAX_RETRIES", DEFAULT_MAX_RETRIES)
    try:
        return max(1, int(raw))
    except (TypeError, ValueError):
        return DEFAULT_MAX_RETRIES


def compare_and_swap(instance, **changes) -> None:
    """
    UPDATE <table> SET ..., version = version + 1 WHERE id = ? AND version = ?

    On success the in-memory instance is brought up to date (including the
    new version) so the same snapshot can be written again later in the same
    unit (e.g. the same product on two sale lines).
    """
    model = type(instance)
    expected = instance.version

    if "updated_at" not in changes and any(
        f.name == "updated_at" for f in model._meta.concrete_fields
    ):
        changes["updated_at"] = timezone.now()

    updated = model.objects.filter(pk=instance.pk, version=expected).update(
        version=F("version") + 1,
        **changes,
    )
    if updated != 1:
        raise ConcurrencyConflictError(
            f"{model.__name__} {instance.pk} was modified concurrently (expected version {expected})"
        )

    for field, value in changes.items():
        setattr(instance, field, value)
    instance.version = expected + 1


def run_optimistic(*, read, write, label: str):
    attempts = max_attempts()

    for attempt in range(1, attempts + 1):
        try:
            snapshot = read()
            with transaction.atomic():
                return write(snapshot)
        except ConcurrencyConflictError:
            if attempt >= attempts:
                logger.warning(
                    "%s: giving up after %s conflicting attempts", label, attempts
                )
                raise
            logger.info(
                "%s: concurrent update detected, retrying (%s/%s)",
                label,
                attempt,
                attempts,
            )
        except IntegrityError:
            raise
        except DatabaseError as exc:
            logger.exception("%s: store failure", label)
            raise StoreUnavailableError(f"{label} failed: {exc}") from exc

    # attempts >= 1 always returns or raises above
    raise ConcurrencyConflictError(f"{label} could not be applied")


def replay_or_run(*, model, operation_id, run, label: str):
    """
    Idempotency by client-generated operation_id.

    - Known operation_id: return the row recorded the first time; nothing is
      applied twice.
    - Two requests racing with the same id: the unique constraint rejects the
      loser, which then returns the winner's row.
    """
    if operation_id is not None:
        existing = model.objects.filter(operation_id=operation_id).first()
        if existing is not None:
            logger.info("%s: replay of operation %s", label, operation_id)
            return existing

    try:
        return run()
    except IntegrityError as exc:
        if operation_id is not None:
            existing = model.objects.filter(operation_id=operation_id).first()
            if existing is not None:
                logger.info("%s: concurrent replay of operation %s", label, operation_id)
                return existing
        raise ConcurrencyConflictError(
            f"{label} conflicted with a concurrent write: {exc}"
        ) from exc


def on_commit(callback) -> None:
    """
    Defer side effects (audit) until the ledger transaction commits.
    """
    transaction.on_commit(callback)
