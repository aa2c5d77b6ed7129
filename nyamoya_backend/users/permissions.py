# users/permissions.py

from rest_framework.permissions import BasePermission

from users.models import ROLE_ADMIN, ROLE_STAFF


# ---------------- BASE ROLE PERMISSION ----------------
class HasRole(BasePermission):
    """
    Base permission to check user role safely.
    """

    allowed_roles = set()

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if getattr(user, "is_superuser", False):
            return True
        return getattr(user, "role", None) in self.allowed_roles


# ---------------- ROLE PERMISSIONS ----------------
class IsAdmin(HasRole):
    """
    Catalogue maintenance and financial reports.
    """

    allowed_roles = {ROLE_ADMIN}


class IsStaffMember(HasRole):
    """
    Day-to-day ledger operations (production, sales, wastage, restock).
    """

    allowed_roles = {ROLE_ADMIN, ROLE_STAFF}
