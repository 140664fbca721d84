# payments/tests/test_webhook.py

from decimal import Decimal
from unittest import mock

from django.test import TestCase
from rest_framework.test import APIClient

from orders.models import OrderStatus, PaymentMethod, PaymentStatus
from orders.services import create_order
from orders.tests.factories import make_address, make_admin, make_product, make_user
from payments.services import apply_payment_event
from payments.tests.helpers import intent_event, signed_event

WEBHOOK_URL = "/api/payments/stripe/webhook/"


class WebhookTests(TestCase):
    """
    GUARANTEES:
    - nothing is touched unless the signature verifies
    - succeeded -> payment completed, placed advances to processing
    - failed -> payment failed only (status and stock untouched)
    - redelivery is harmless
    """

    def setUp(self):
        self.client = APIClient()
        self.user = make_user()
        self.address = make_address(self.user)
        self.product = make_product(stock=3)

    def _order(self, method="cod", **extra):
        return create_order(
            user=self.user,
            address_id=self.address.id,
            items=[{"product_id": self.product.id, "quantity": 1}],
            payment_method=method,
            **extra,
        )

    def _post(self, event, **kwargs):
        payload, header = signed_event(event, **kwargs)
        return self.client.generic(
            "POST",
            WEBHOOK_URL,
            payload,
            content_type="application/json",
            HTTP_STRIPE_SIGNATURE=header,
        )

    def test_bad_signature_is_rejected_without_mutation(self):
        order = self._order()

        res = self._post(
            intent_event("payment_intent.succeeded", order_id=order.id),
            secret="whsec_attacker",
        )

        self.assertEqual(res.status_code, 400)
        order.refresh_from_db()
        self.assertEqual(order.payment_status, PaymentStatus.PENDING)
        self.assertEqual(order.status, OrderStatus.PLACED)

    def test_missing_signature_is_rejected(self):
        order = self._order()
        res = self.client.post(
            WEBHOOK_URL,
            intent_event("payment_intent.succeeded", order_id=order.id),
            format="json",
        )
        self.assertEqual(res.status_code, 400)

    def test_succeeded_completes_payment_and_advances_placed(self):
        order = self._order()

        res = self._post(intent_event("payment_intent.succeeded", order_id=order.id, intent_id="pi_42"))

        self.assertEqual(res.status_code, 200)
        order.refresh_from_db()
        self.assertEqual(order.payment_status, PaymentStatus.COMPLETED)
        self.assertEqual(order.status, OrderStatus.PROCESSING)
        self.assertEqual(order.payment_reference, "pi_42")
        self.assertEqual(order.payment_method, PaymentMethod.CARD)

    def test_succeeded_for_card_order_is_a_no_op(self):
        order = self._order(method="card", payment_reference="pi_card")

        res = self._post(intent_event("payment_intent.succeeded", order_id=order.id, intent_id="pi_card"))

        self.assertEqual(res.status_code, 200)
        order.refresh_from_db()
        self.assertEqual(order.status, OrderStatus.PROCESSING)
        self.assertEqual(order.payment_status, PaymentStatus.COMPLETED)

    def test_failed_marks_payment_failed_only(self):
        order = self._order()

        res = self._post(intent_event("payment_intent.payment_failed", order_id=order.id))

        self.assertEqual(res.status_code, 200)
        order.refresh_from_db()
        self.assertEqual(order.payment_status, PaymentStatus.FAILED)
        self.assertEqual(order.status, OrderStatus.PLACED)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 2)

    def test_redelivery_is_harmless(self):
        order = self._order()
        event = intent_event("payment_intent.succeeded", order_id=order.id)

        self._post(event)
        res = self._post(event)

        self.assertEqual(res.status_code, 200)
        order.refresh_from_db()
        self.assertEqual(order.payment_status, PaymentStatus.COMPLETED)
        self.assertEqual(order.status, OrderStatus.PROCESSING)

    def test_other_event_types_are_acknowledged_and_ignored(self):
        order = self._order()

        res = self._post({"id": "evt_x", "type": "charge.refunded", "data": {"object": {}}})

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["detail"], "ignored")
        order.refresh_from_db()
        self.assertEqual(order.payment_status, PaymentStatus.PENDING)

    def test_unknown_order_is_acknowledged(self):
        res = self._post(
            intent_event("payment_intent.succeeded", order_id="00000000-0000-0000-0000-000000000000")
        )

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["detail"], "unknown_order")

    def test_internal_failure_is_logged_and_acknowledged(self):
        order = self._order()

        with mock.patch(
            "payments.views.apply_payment_event", side_effect=RuntimeError("db down")
        ), self.assertLogs("payments.views", level="ERROR"):
            res = self._post(intent_event("payment_intent.succeeded", order_id=order.id))

        self.assertEqual(res.status_code, 200)

    def test_unverified_objects_cannot_be_applied(self):
        with self.assertRaises(TypeError):
            apply_payment_event({"type": "payment_intent.succeeded"})


class PaymentIntentApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = make_user()
        self.address = make_address(self.user)
        self.product = make_product(price="100.00", stock=5)
        self.client.force_authenticate(self.user)

    @mock.patch("payments.services.stripe._request_json")
    def test_intent_from_cart(self, request_json):
        from cart.services import replace_cart_items

        request_json.return_value = {"id": "pi_1", "client_secret": "pi_1_secret"}
        replace_cart_items(user=self.user, items=[{"product_id": self.product.id, "quantity": 2}])

        res = self.client.post("/api/payments/intent/", {}, format="json")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["client_secret"], "pi_1_secret")
        # 200.00 + 10.00 shipping + 16.00 tax
        self.assertEqual(Decimal(res.data["amount"]), Decimal("226.00"))

    def test_empty_cart_is_400(self):
        res = self.client.post("/api/payments/intent/", {}, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "empty_cart")

    @mock.patch("payments.services.stripe._request_json")
    def test_intent_for_order_carries_order_id(self, request_json):
        request_json.return_value = {"id": "pi_2", "client_secret": "pi_2_secret"}
        order = create_order(
            user=self.user,
            address_id=self.address.id,
            items=[{"product_id": self.product.id, "quantity": 1}],
            payment_method="cod",
        )

        res = self.client.post("/api/payments/intent/", {"order_id": str(order.id)}, format="json")

        self.assertEqual(res.status_code, 200)
        params = request_json.call_args.kwargs["params"]
        self.assertEqual(params["metadata"]["order_id"], str(order.id))
        self.assertEqual(params["amount"], 11800)

    @mock.patch("payments.services.stripe._request_json")
    def test_admin_cannot_open_intent_for_someone_elses_order(self, request_json):
        order = create_order(
            user=self.user,
            address_id=self.address.id,
            items=[{"product_id": self.product.id, "quantity": 1}],
            payment_method="cod",
        )
        self.client.force_authenticate(make_admin())

        res = self.client.post("/api/payments/intent/", {"order_id": str(order.id)}, format="json")

        self.assertEqual(res.status_code, 403)
        self.assertEqual(res.data["error"]["code"], "forbidden")
        request_json.assert_not_called()

    def test_amount_mismatch_is_400(self):
        order = create_order(
            user=self.user,
            address_id=self.address.id,
            items=[{"product_id": self.product.id, "quantity": 1}],
            payment_method="cod",
        )

        res = self.client.post(
            "/api/payments/intent/",
            {"order_id": str(order.id), "amount": "1.00"},
            format="json",
        )

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "amount_mismatch")

    @mock.patch("payments.services.stripe._request_json")
    def test_provider_failure_is_502(self, request_json):
        from payments.services import PaymentProviderError

        request_json.side_effect = PaymentProviderError("Stripe URLError: timed out")
        order = create_order(
            user=self.user,
            address_id=self.address.id,
            items=[{"product_id": self.product.id, "quantity": 1}],
            payment_method="cod",
        )

        res = self.client.post("/api/payments/intent/", {"order_id": str(order.id)}, format="json")

        self.assertEqual(res.status_code, 502)
