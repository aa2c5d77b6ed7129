from .audit_service import record_action, record_action_on_commit

__all__ = [
    "record_action",
    "record_action_on_commit",
]
