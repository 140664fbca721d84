# addresses/tests/test_addresses.py

from django.core.exceptions import ValidationError
from django.test import TestCase
from rest_framework.test import APIClient

from addresses.models import Address, normalize_postal_code
from users.models import User


def make_address(user, **overrides):
    data = {
        "user": user,
        "full_name": "Asha Rai",
        "phone_number": "9800000000",
        "street_address": "12 Lakeside Rd",
        "city": "Pokhara",
        "state": "Gandaki",
        "postal_code": "33700",
    }
    data.update(overrides)
    return Address.objects.create(**data)


class PostalCodeTests(TestCase):
    def test_accepts_five_digits_and_zip_plus_four(self):
        self.assertEqual(normalize_postal_code("33700"), "33700")
        self.assertEqual(normalize_postal_code("12345-6789"), "12345-6789")

    def test_spaces_are_ignored(self):
        self.assertEqual(normalize_postal_code(" 337 00 "), "33700")

    def test_rejects_malformed_codes(self):
        for bad in ("1234", "123456", "12345-67", "abcde", ""):
            with self.subTest(code=bad), self.assertRaises(ValidationError):
                normalize_postal_code(bad)

    def test_rejects_all_zeros(self):
        with self.assertRaises(ValidationError):
            normalize_postal_code("00000")
        with self.assertRaises(ValidationError):
            normalize_postal_code("00000-0000")


class DefaultAddressTests(TestCase):
    """
    GUARANTEE:
    - a user has at most one default address at any time
    """

    def setUp(self):
        self.user = User.objects.create_user(email="asha@example.com", password="pass12345")
        self.other = User.objects.create_user(email="other@example.com", password="pass12345")

    def test_setting_default_clears_previous_default(self):
        first = make_address(self.user, is_default=True)
        second = make_address(self.user, street_address="99 Hill St", is_default=True)

        first.refresh_from_db()
        second.refresh_from_db()
        self.assertFalse(first.is_default)
        self.assertTrue(second.is_default)
        self.assertEqual(Address.objects.filter(user=self.user, is_default=True).count(), 1)

    def test_other_users_default_is_untouched(self):
        theirs = make_address(self.other, is_default=True)
        make_address(self.user, is_default=True)

        theirs.refresh_from_db()
        self.assertTrue(theirs.is_default)


class AddressApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="asha@example.com", password="pass12345")
        self.other = User.objects.create_user(email="other@example.com", password="pass12345")
        self.client.force_authenticate(self.user)

    def _payload(self, **overrides):
        data = {
            "full_name": "Asha Rai",
            "phone_number": "9800000000",
            "street_address": "12 Lakeside Rd",
            "city": "Pokhara",
            "state": "Gandaki",
            "postal_code": "33700",
        }
        data.update(overrides)
        return data

    def test_unauthenticated_is_rejected(self):
        res = APIClient().get("/api/addresses/")
        self.assertEqual(res.status_code, 401)

    def test_create_normalizes_postal_code(self):
        res = self.client.post("/api/addresses/", self._payload(postal_code="337 00"), format="json")

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["postal_code"], "33700")
        self.assertEqual(Address.objects.get(id=res.data["id"]).user, self.user)

    def test_malformed_postal_code_is_a_validation_error(self):
        res = self.client.post("/api/addresses/", self._payload(postal_code="00000"), format="json")

        self.assertEqual(res.status_code, 400)
        self.assertIn("postal_code", res.data)

    def test_patch_default_flips_previous(self):
        first = make_address(self.user, is_default=True)
        second = make_address(self.user, street_address="99 Hill St")

        res = self.client.patch(f"/api/addresses/{second.id}/", {"is_default": True}, format="json")

        self.assertEqual(res.status_code, 200)
        first.refresh_from_db()
        self.assertFalse(first.is_default)

    def test_list_shows_only_own_addresses(self):
        make_address(self.user)
        make_address(self.other)

        res = self.client.get("/api/addresses/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data), 1)

    def test_foreign_address_is_not_found(self):
        theirs = make_address(self.other)

        self.assertEqual(self.client.get(f"/api/addresses/{theirs.id}/").status_code, 404)
        self.assertEqual(self.client.delete(f"/api/addresses/{theirs.id}/").status_code, 404)
        self.assertTrue(Address.objects.filter(id=theirs.id).exists())
