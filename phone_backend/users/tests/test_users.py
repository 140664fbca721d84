# users/tests/test_users.py

from django.test import TestCase
from rest_framework.test import APIClient

from users.models import User


class UserManagerTests(TestCase):
    def test_name_defaults_to_email_local_part(self):
        user = User.objects.create_user(email="asha@example.com", password="pass12345")

        self.assertEqual(user.name, "asha")
        self.assertEqual(user.role, "customer")
        self.assertFalse(user.is_admin)
        self.assertTrue(user.check_password("pass12345"))

    def test_email_is_required(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email="  ", password="pass12345")

    def test_superuser_is_admin(self):
        user = User.objects.create_superuser(email="root@example.com", password="pass12345")

        self.assertTrue(user.is_admin)
        self.assertTrue(user.is_staff)


class AuthApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_register_always_creates_customer(self):
        res = self.client.post(
            "/api/auth/register/",
            {"email": "new@example.com", "password": "pass12345", "name": "New", "role": "admin"},
            format="json",
        )

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["role"], "customer")
        self.assertNotIn("password", res.data)

    def test_jwt_login_and_me(self):
        User.objects.create_user(email="asha@example.com", password="pass12345", name="Asha")

        res = self.client.post(
            "/api/auth/jwt/create/",
            {"email": "asha@example.com", "password": "pass12345"},
            format="json",
        )
        self.assertEqual(res.status_code, 200)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {res.data['access']}")
        res = self.client.get("/api/auth/me/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["name"], "Asha")

    def test_me_requires_authentication(self):
        self.assertEqual(self.client.get("/api/auth/me/").status_code, 401)

    def test_health_and_root_are_public(self):
        self.assertEqual(self.client.get("/api/health/").status_code, 200)
        self.assertEqual(self.client.get("/api/").status_code, 200)
