# payments/tests/helpers.py

import json
import time

from payments.services.stripe import compute_signature

TEST_WEBHOOK_SECRET = "whsec_test_storefront"


def signed_event(event: dict, *, secret: str = TEST_WEBHOOK_SECRET, timestamp: int | None = None):
    """Returns (raw_body, Stripe-Signature header) for an event dict."""
    payload = json.dumps(event).encode("utf-8")
    ts = int(time.time()) if timestamp is None else timestamp
    sig = compute_signature(payload=payload, timestamp=ts, secret=secret)
    return payload, f"t={ts},v1={sig}"


def intent_event(event_type: str, *, order_id, intent_id="pi_test_1", event_id="evt_1"):
    return {
        "id": event_id,
        "type": event_type,
        "data": {
            "object": {
                "id": intent_id,
                "object": "payment_intent",
                "metadata": {"order_id": str(order_id)},
            }
        },
    }
