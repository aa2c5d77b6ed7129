# users/admin.py

"""
USERS ADMIN

Two roles only (admin / staff). Role changes made here are written to the
audit log like any other privileged action.
"""

from __future__ import annotations

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from audit.services import record_action
from users.models import ROLE_ADMIN, ROLE_STAFF

User = get_user_model()


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    ordering = ("email",)
    list_display = ("email", "role", "is_active", "created_at")
    list_filter = ("role", "is_active")
    search_fields = ("email", "first_name", "last_name")
    readonly_fields = ("created_at", "updated_at", "last_login")
    actions = ("make_admin", "make_staff")

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Profile", {"fields": ("first_name", "last_name", "role")}),
        ("Access", {"fields": ("is_active", "is_staff", "is_superuser")}),
        ("Dates", {"fields": ("last_login", "created_at", "updated_at")}),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "password1", "password2", "role", "is_active"),
            },
        ),
    )

    def _set_role(self, request, queryset, role: str) -> int:
        changed = 0
        for user in queryset.exclude(role=role):
            user.role = role
            user.save(update_fields=["role", "updated_at"])
            record_action(request.user, "Changed Role", f"{user.email} -> {role}")
            changed += 1
        self.message_user(request, f"{changed} user(s) set to {role}.")
        return changed

    @admin.action(description="Set role: admin")
    def make_admin(self, request, queryset):
        return self._set_role(request, queryset, ROLE_ADMIN)

    @admin.action(description="Set role: staff")
    def make_staff(self, request, queryset):
        return self._set_role(request, queryset, ROLE_STAFF)
