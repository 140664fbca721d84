# payments/services/reconciliation.py

"""
PAYMENT RECONCILIATION (processor -> order)

- payment_intent.succeeded       -> payment completed; placed -> processing
- payment_intent.payment_failed  -> payment failed; status and stock untouched
- anything else                  -> ignored

The order is found through metadata.order_id on the PaymentIntent.
Writes are naturally idempotent: redelivery is safe but not detected.
"""

from __future__ import annotations

import logging

from orders.services import OrderNotFoundError, record_payment_failure, record_payment_success
from payments.services.stripe import VerifiedEvent

logger = logging.getLogger(__name__)

EVENT_SUCCEEDED = "payment_intent.succeeded"
EVENT_FAILED = "payment_intent.payment_failed"

OUTCOME_COMPLETED = "completed"
OUTCOME_FAILED = "failed"
OUTCOME_IGNORED = "ignored"
OUTCOME_UNKNOWN_ORDER = "unknown_order"


def apply_payment_event(event: VerifiedEvent) -> str:
    if not isinstance(event, VerifiedEvent):
        raise TypeError("apply_payment_event() needs a VerifiedEvent")

    if event.type not in (EVENT_SUCCEEDED, EVENT_FAILED):
        logger.info("Webhook event ignored", extra={"event_id": event.id, "event_type": event.type})
        return OUTCOME_IGNORED

    intent = event.object
    order_id = str((intent.get("metadata") or {}).get("order_id") or "").strip()
    if not order_id:
        logger.warning("Payment event without order_id", extra={"event_id": event.id})
        return OUTCOME_UNKNOWN_ORDER

    try:
        if event.type == EVENT_SUCCEEDED:
            record_payment_success(order_id=order_id, payment_reference=intent.get("id"))
            outcome = OUTCOME_COMPLETED
        else:
            record_payment_failure(order_id=order_id)
            outcome = OUTCOME_FAILED
    except OrderNotFoundError:
        logger.warning("Payment event for unknown order", extra={"event_id": event.id, "order_id": order_id})
        return OUTCOME_UNKNOWN_ORDER

    logger.info(
        "Payment event applied",
        extra={"event_id": event.id, "order_id": order_id, "outcome": outcome},
    )
    return outcome
