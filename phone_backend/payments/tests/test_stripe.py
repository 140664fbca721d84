# payments/tests/test_stripe.py

import time
from decimal import Decimal
from unittest import mock

from django.test import SimpleTestCase

from payments.services import (
    PaymentProviderError,
    SignatureVerificationError,
    VerifiedEvent,
    construct_event,
    create_payment_intent,
)
from payments.services.stripe import _flatten, _to_minor_units
from payments.tests.helpers import TEST_WEBHOOK_SECRET, intent_event, signed_event


class SignatureTests(SimpleTestCase):
    def setUp(self):
        self.event = intent_event("payment_intent.succeeded", order_id="abc")

    def test_valid_signature_yields_verified_event(self):
        payload, header = signed_event(self.event)

        event = construct_event(payload=payload, sig_header=header)

        self.assertIsInstance(event, VerifiedEvent)
        self.assertEqual(event.type, "payment_intent.succeeded")
        self.assertEqual(event.object["metadata"]["order_id"], "abc")

    def test_wrong_secret_is_rejected(self):
        payload, header = signed_event(self.event, secret="whsec_other")

        with self.assertRaises(SignatureVerificationError):
            construct_event(payload=payload, sig_header=header)

    def test_tampered_body_is_rejected(self):
        payload, header = signed_event(self.event)

        with self.assertRaises(SignatureVerificationError):
            construct_event(payload=payload.replace(b"abc", b"xyz"), sig_header=header)

    def test_stale_timestamp_is_rejected(self):
        payload, header = signed_event(self.event, timestamp=int(time.time()) - 3600)

        with self.assertRaises(SignatureVerificationError):
            construct_event(payload=payload, sig_header=header, tolerance=300)

    def test_missing_or_malformed_header(self):
        payload, _ = signed_event(self.event)

        for header in (None, "", "v1=deadbeef", "t=notanumber,v1=00"):
            with self.subTest(header=header), self.assertRaises(SignatureVerificationError):
                construct_event(payload=payload, sig_header=header, secret=TEST_WEBHOOK_SECRET)

    def test_verified_event_cannot_be_built_directly(self):
        with self.assertRaises(TypeError):
            VerifiedEvent(_token=object(), id="evt", type="payment_intent.succeeded", data={})


class PaymentIntentClientTests(SimpleTestCase):
    def test_minor_units(self):
        self.assertEqual(_to_minor_units(Decimal("12.34"), "npr"), 1234)
        self.assertEqual(_to_minor_units(Decimal("500"), "jpy"), 500)
        with self.assertRaises(ValueError):
            _to_minor_units(Decimal("0"), "npr")

    def test_flatten_uses_bracket_notation(self):
        self.assertEqual(
            _flatten({"amount": 100, "metadata": {"order_id": "x"}, "automatic_payment_methods": {"enabled": True}}),
            [
                ("amount", "100"),
                ("metadata[order_id]", "x"),
                ("automatic_payment_methods[enabled]", "true"),
            ],
        )

    @mock.patch("payments.services.stripe._request_json")
    def test_create_payment_intent(self, request_json):
        request_json.return_value = {"id": "pi_1", "client_secret": "pi_1_secret"}

        intent = create_payment_intent(amount=Decimal("25.50"), metadata={"order_id": "o1"})

        self.assertEqual(intent["id"], "pi_1")
        self.assertEqual(intent["amount"], 2550)
        method, path = request_json.call_args.args
        self.assertEqual((method, path), ("POST", "/v1/payment_intents"))
        self.assertEqual(request_json.call_args.kwargs["params"]["metadata"], {"order_id": "o1"})

    @mock.patch("payments.services.stripe._request_json")
    def test_incomplete_response_is_a_provider_error(self, request_json):
        request_json.return_value = {"id": "pi_1"}

        with self.assertRaises(PaymentProviderError):
            create_payment_intent(amount=Decimal("1.00"))
