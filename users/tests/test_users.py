import io
import os
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase
from rest_framework.test import APIClient

User = get_user_model()


class UserManagerTests(TestCase):
    def test_create_user_normalizes_email_and_defaults_to_editor(self):
        user = User.objects.create_user(email="Clerk@Example.COM", password="pass")

        self.assertEqual(user.email, "Clerk@example.com")
        self.assertEqual(user.role, "editor")
        self.assertTrue(user.check_password("pass"))
        self.assertFalse(user.is_admin)

    def test_create_user_requires_email(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email="", password="pass")

    def test_create_superuser_is_admin(self):
        user = User.objects.create_superuser(email="owner@example.com", password="pass")

        self.assertEqual(user.role, "admin")
        self.assertTrue(user.is_superuser)
        self.assertTrue(user.is_admin)


class MeEndpointTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            email="staff@example.com",
            password="pass",
            role="staff",
            first_name="Sam",
        )

    def test_me_requires_authentication(self):
        res = self.client.get("/api/auth/me/")
        self.assertEqual(res.status_code, 401)

    def test_me_returns_profile(self):
        self.client.force_authenticate(self.user)
        res = self.client.get("/api/auth/me/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["data"]["email"], "staff@example.com")
        self.assertEqual(res.data["data"]["role"], "staff")


class EnsureSuperuserCommandTests(TestCase):
    def test_skips_without_env(self):
        out = io.StringIO()
        with mock.patch.dict(os.environ, {"AUTO_ADMIN_EMAIL": "", "AUTO_ADMIN_PASSWORD": ""}):
            call_command("ensure_superuser", stdout=out)

        self.assertIn("Skipping", out.getvalue())
        self.assertFalse(User.objects.exists())

    def test_creates_then_promotes(self):
        env = {"AUTO_ADMIN_EMAIL": "owner@example.com", "AUTO_ADMIN_PASSWORD": "s3cret"}
        with mock.patch.dict(os.environ, env):
            call_command("ensure_superuser", stdout=io.StringIO())
            user = User.objects.get(email="owner@example.com")
            self.assertTrue(user.is_admin)

            user.role = "editor"
            user.is_superuser = False
            user.save()
            call_command("ensure_superuser", stdout=io.StringIO())

        user.refresh_from_db()
        self.assertEqual(user.role, "admin")
        self.assertTrue(user.check_password("s3cret"))
