# audit/services/audit_service.py

"""
AUDIT SINK (FIRE-AND-FORGET)

Rules:
- Logging an action must NEVER block or fail the business operation.
- Failures are written to the local "audit" logger and swallowed.
- Ledger services schedule entries with record_action_on_commit() so a rolled
  back operation leaves no audit trail claiming it happened.
"""

from __future__ import annotations

import logging

from django.db import transaction

from audit.models import AuditLog

logger = logging.getLogger("audit")


def _principal(user) -> tuple[str, str]:
    if user is None or not getattr(user, "is_authenticated", False):
        return "Unknown", ""
    email = (getattr(user, "email", "") or "").strip() or "Unknown"
    role = (getattr(user, "role", "") or "").strip()
    return email, role


def record_action(user, action: str, details: str = "") -> AuditLog | None:
    email, role = _principal(user)
    try:
        return AuditLog.objects.create(
            user=email,
            role=role,
            action=(action or "").strip()[:100] or "Unknown",
            details=details or "",
        )
    except Exception:
        logger.exception("Failed to log action %r for %s", action, email)
        return None


def record_action_on_commit(user, action: str, details: str = "") -> None:
    transaction.on_commit(lambda: record_action(user, action, details))
