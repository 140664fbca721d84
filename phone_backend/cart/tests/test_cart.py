# cart/tests/test_cart.py

from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from cart.models import CartItem
from cart.services import cart_total, clear_cart, replace_cart_items
from products.models import Product
from users.models import User


class CartTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="buyer@example.com", password="pass12345")
        self.client.force_authenticate(self.user)

        self.pixel = Product.objects.create(
            name="Pixel 9",
            description="Google phone",
            brand="Google",
            price=Decimal("800.00"),
            offer_price=Decimal("750.00"),
            stock=4,
        )
        self.galaxy = Product.objects.create(
            name="Galaxy S24",
            description="Samsung phone",
            brand="Samsung",
            price=Decimal("700.00"),
            stock=4,
        )

    def test_get_creates_empty_cart(self):
        res = self.client.get("/api/cart/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["items"], [])

    def test_put_replaces_contents(self):
        replace_cart_items(user=self.user, items=[{"product_id": self.galaxy.id, "quantity": 3}])

        res = self.client.put(
            "/api/cart/",
            {"items": [{"product_id": str(self.pixel.id), "quantity": 2}]},
            format="json",
        )

        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data["items"]), 1)
        self.assertEqual(res.data["items"][0]["name"], "Pixel 9")
        self.assertEqual(res.data["items"][0]["quantity"], 2)

    def test_zero_quantity_is_rejected(self):
        res = self.client.put(
            "/api/cart/",
            {"items": [{"product_id": str(self.pixel.id), "quantity": 0}]},
            format="json",
        )
        self.assertEqual(res.status_code, 400)

    def test_unknown_product_is_not_found(self):
        res = self.client.put(
            "/api/cart/",
            {"items": [{"product_id": "00000000-0000-0000-0000-000000000001", "quantity": 1}]},
            format="json",
        )
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["error"]["code"], "product_not_found")

    def test_total_uses_offer_price(self):
        replace_cart_items(
            user=self.user,
            items=[
                {"product_id": self.pixel.id, "quantity": 2},
                {"product_id": self.galaxy.id, "quantity": 1},
            ],
        )
        self.assertEqual(cart_total(self.user), Decimal("2200.00"))

    def test_clear_cart(self):
        replace_cart_items(user=self.user, items=[{"product_id": self.pixel.id, "quantity": 1}])
        clear_cart(self.user)
        self.assertFalse(CartItem.objects.filter(cart__user=self.user).exists())
