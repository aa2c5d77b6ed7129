# audit/models.py

"""
AUDIT LOG (append-only)

One row per mutating engine operation:
    user, role, action, details, created_at

The user is stored as a plain email string (not a FK) so deleting a staff
account never rewrites history.
"""

from django.core.exceptions import ValidationError
from django.db import models


class AuditLog(models.Model):
    user = models.CharField(max_length=254, default="Unknown")
    role = models.CharField(max_length=20, blank=True, default="")
    action = models.CharField(max_length=100, db_index=True)
    details = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("AuditLog records are immutable")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("AuditLog records cannot be deleted")

    def __str__(self):
        return f"{self.created_at:%Y-%m-%d %H:%M} | {self.user} | {self.action}"
