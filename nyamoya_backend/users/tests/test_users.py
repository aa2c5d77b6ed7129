from unittest import mock

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.test import RequestFactory, TestCase
from rest_framework.test import APIClient

from audit.models import AuditLog
from users.admin import UserAdmin
from users.models import ROLE_ADMIN, ROLE_STAFF

User = get_user_model()


class UserModelTests(TestCase):
    def test_default_role_is_staff(self):
        user = User.objects.create_user(email="Staff@Example.com", password="pass")
        self.assertEqual(user.role, ROLE_STAFF)
        self.assertFalse(user.is_admin_role)

    def test_superuser_is_admin(self):
        user = User.objects.create_superuser(email="root@example.com", password="pass")
        self.assertEqual(user.role, ROLE_ADMIN)
        self.assertTrue(user.is_admin_role)

    def test_email_required(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email="", password="pass")


class AuthApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="staff@example.com", password="Pass1234!", role="staff")

    def test_jwt_login_and_me(self):
        response = self.client.post(
            "/api/auth/jwt/create/",
            {"email": "staff@example.com", "password": "Pass1234!"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        me = self.client.get("/api/auth/me/")

        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.data["user"]["email"], "staff@example.com")
        self.assertEqual(me.data["user"]["role"], "staff")

    def test_me_requires_auth(self):
        self.assertEqual(self.client.get("/api/auth/me/").status_code, 401)

    def test_health_is_public(self):
        response = self.client.get("/api/health/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["db"], "ok")


class UserAdminRoleActionTests(TestCase):
    def setUp(self):
        self.root = User.objects.create_superuser(email="root@example.com", password="pass")
        self.staff = User.objects.create_user(email="staff@example.com", password="pass")
        self.model_admin = UserAdmin(User, admin.site)
        self.request = RequestFactory().post("/")
        self.request.user = self.root

    def test_promote_and_demote_are_audited(self):
        with mock.patch.object(UserAdmin, "message_user"):
            promoted = self.model_admin.make_admin(self.request, User.objects.filter(pk=self.staff.pk))
            # already admin: nothing to change
            repeated = self.model_admin.make_admin(self.request, User.objects.filter(pk=self.staff.pk))
            demoted = self.model_admin.make_staff(self.request, User.objects.filter(pk=self.staff.pk))

        self.assertEqual((promoted, repeated, demoted), (1, 0, 1))
        self.staff.refresh_from_db()
        self.assertEqual(self.staff.role, ROLE_STAFF)

        entries = AuditLog.objects.filter(action="Changed Role").order_by("id")
        self.assertEqual(
            [e.details for e in entries],
            ["staff@example.com -> admin", "staff@example.com -> staff"],
        )
        self.assertEqual(entries[0].user, "root@example.com")
