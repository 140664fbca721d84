# receipts/tests/test_receipts.py

from decimal import Decimal
from unittest import mock

from django.core.exceptions import ValidationError
from django.test import TestCase
from rest_framework.test import APIClient

from orders.services import create_order
from orders.tests.factories import make_address, make_product, make_user
from receipts.models import Receipt
from receipts.services import (
    ReceiptNotFoundError,
    ReceiptOwnershipError,
    get_or_create_receipt,
)


class ReceiptServiceTests(TestCase):
    """
    GUARANTEES:
    - one receipt per order; asking again returns the same row unchanged
    - lines are snapshotted at generation time
    - receipt numbers follow RCP-YYYYMMDD-NNNN per day
    """

    def setUp(self):
        self.user = make_user()
        self.address = make_address(self.user)
        self.pixel = make_product("Pixel 9", price="800.00", offer_price="750.00", stock=5)
        self.galaxy = make_product("Galaxy S24", price="700.00", stock=5, brand="Samsung")

    def _order(self, user=None, address=None, items=None):
        user = user or self.user
        return create_order(
            user=user,
            address_id=(address or self.address).id,
            items=items or [{"product_id": self.pixel.id, "quantity": 2}],
            payment_method="card",
            payment_reference="pi_abc",
        )

    def test_generation_is_idempotent(self):
        order = self._order()

        first, created = get_or_create_receipt(user=self.user, order_id=order.id)
        self.pixel.price = Decimal("1.00")
        self.pixel.offer_price = None
        self.pixel.save()
        second, created_again = get_or_create_receipt(user=self.user, order_id=order.id)

        self.assertTrue(created)
        self.assertFalse(created_again)
        self.assertEqual(first.id, second.id)
        self.assertEqual(first.items, second.items)
        self.assertEqual(Receipt.objects.filter(order=order).count(), 1)

    def test_snapshot_content(self):
        order = self._order()

        receipt, _ = get_or_create_receipt(user=self.user, order_id=order.id)

        self.assertEqual(receipt.billing_info["customer_email"], "buyer@example.com")
        self.assertEqual(receipt.billing_info["billing_address"]["postal_code"], "33700")
        self.assertEqual(receipt.items[0]["product_name"], "Pixel 9")
        self.assertEqual(receipt.items[0]["unit_price"], "750.00")
        self.assertEqual(receipt.items[0]["total_price"], "1500.00")
        self.assertEqual(receipt.payment_details["transaction_id"], "pi_abc")
        self.assertEqual(receipt.total, order.total)
        self.assertEqual(receipt.order_date, order.created_at)

    def test_deleted_product_renders_unknown(self):
        order = self._order(items=[{"product_id": self.galaxy.id, "quantity": 1}])
        self.galaxy.delete()

        receipt, _ = get_or_create_receipt(user=self.user, order_id=order.id)

        self.assertEqual(receipt.items[0]["product_name"], "Unknown Product")
        self.assertEqual(receipt.items[0]["unit_price"], "0.00")

    def test_numbering_is_sequential_per_day(self):
        first, _ = get_or_create_receipt(user=self.user, order_id=self._order().id)
        second, _ = get_or_create_receipt(user=self.user, order_id=self._order().id)

        self.assertRegex(first.receipt_no, r"^RCP-\d{8}-0001$")
        self.assertRegex(second.receipt_no, r"^RCP-\d{8}-0002$")

    def test_number_collision_takes_next_number(self):
        first, _ = get_or_create_receipt(user=self.user, order_id=self._order().id)
        order = self._order()

        with mock.patch(
            "receipts.services.receipt_service._next_receipt_no",
            side_effect=[first.receipt_no, first.receipt_no[:-4] + "0002"],
        ):
            receipt, created = get_or_create_receipt(user=self.user, order_id=order.id)

        self.assertTrue(created)
        self.assertTrue(receipt.receipt_no.endswith("-0002"))

    def test_foreign_order_is_forbidden(self):
        order = self._order()
        stranger = make_user("stranger@example.com")

        with self.assertRaises(ReceiptOwnershipError):
            get_or_create_receipt(user=stranger, order_id=order.id)

    def test_missing_address_is_not_found(self):
        order = self._order()
        self.address.delete()

        with self.assertRaises(ReceiptNotFoundError):
            get_or_create_receipt(user=self.user, order_id=order.id)

    def test_receipts_are_immutable(self):
        receipt, _ = get_or_create_receipt(user=self.user, order_id=self._order().id)

        receipt.total = Decimal("0.00")
        with self.assertRaises(ValidationError):
            receipt.save()


class ReceiptApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = make_user()
        self.address = make_address(self.user)
        self.product = make_product(stock=5)
        self.order = create_order(
            user=self.user,
            address_id=self.address.id,
            items=[{"product_id": self.product.id, "quantity": 1}],
            payment_method="cod",
        )
        self.client.force_authenticate(self.user)

    def test_create_then_get_returns_same_receipt(self):
        res = self.client.post("/api/receipts/", {"order_id": str(self.order.id)}, format="json")
        self.assertEqual(res.status_code, 201)
        receipt_id = res.data["id"]
        self.assertIsNotNone(res.data["order_date"])

        res = self.client.post("/api/receipts/", {"order_id": str(self.order.id)}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["id"], receipt_id)

        res = self.client.get(f"/api/receipts/{receipt_id}/")
        self.assertEqual(res.status_code, 200)

        res = self.client.get(f"/api/receipts/order/{self.order.id}/")
        self.assertEqual(res.data["id"], receipt_id)

        res = self.client.get("/api/receipts/")
        self.assertEqual(len(res.data), 1)

    def test_unknown_order_is_404(self):
        res = self.client.post(
            "/api/receipts/", {"order_id": "00000000-0000-0000-0000-000000000000"}, format="json"
        )
        self.assertEqual(res.status_code, 404)

    def test_other_users_receipt_is_403(self):
        res = self.client.post("/api/receipts/", {"order_id": str(self.order.id)}, format="json")
        stranger = make_user("stranger@example.com")
        self.client.force_authenticate(stranger)

        res = self.client.get(f"/api/receipts/{res.data['id']}/")

        self.assertEqual(res.status_code, 403)

    def test_missing_receipt_for_order_is_404(self):
        res = self.client.get(f"/api/receipts/order/{self.order.id}/")
        self.assertEqual(res.status_code, 404)
