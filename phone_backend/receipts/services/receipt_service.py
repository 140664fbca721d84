# receipts/services/receipt_service.py

"""
RECEIPT SERVICE

Purpose:
- Generate a receipt for an order the first time it is asked for,
  then keep returning that same row.

Snapshot rules:
- billing info comes from the user and the order's delivery address
- each line is priced with the product's effective price at generation
  time; a product that no longer exists renders as "Unknown Product" / 0.00
- money summary is copied from the order (never recomputed)
- the order date is kept alongside the generation timestamp

Numbering:
- RCP-YYYYMMDD-NNNN where NNNN is the 1-based count of receipts already
  issued that day. Two requests racing for the same number hit the unique
  constraint; the loser re-reads (same order) or takes the next number.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from orders.models import Order
from products.models import Product
from receipts.models import Receipt

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
UNKNOWN_PRODUCT = "Unknown Product"
MAX_NUMBERING_ATTEMPTS = 5
LIST_LIMIT = 50


class ReceiptError(Exception):
    code = "receipt_error"
    http_status = 400


class ReceiptNotFoundError(ReceiptError):
    code = "not_found"
    http_status = 404


class ReceiptOwnershipError(ReceiptError):
    code = "forbidden"
    http_status = 403

    def __init__(self, message="You do not have access to this receipt"):
        super().__init__(message)


def _money(v) -> Decimal:
    return Decimal(str(v or "0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _next_receipt_no() -> str:
    prefix = timezone.localdate().strftime("RCP-%Y%m%d-")
    issued_today = Receipt.objects.filter(receipt_no__startswith=prefix).count()
    return f"{prefix}{issued_today + 1:04d}"


def _snapshot_items(order: Order) -> list[dict]:
    order_items = list(order.items.all())
    products = {
        p.id: p for p in Product.objects.filter(id__in=[i.product_id for i in order_items])
    }

    lines = []
    for item in order_items:
        product = products.get(item.product_id)
        unit_price = _money(product.effective_price) if product else Decimal("0.00")
        lines.append(
            {
                "product_id": str(item.product_id),
                "product_name": product.name if product else UNKNOWN_PRODUCT,
                "quantity": item.quantity,
                "unit_price": str(unit_price),
                "total_price": str(_money(unit_price * item.quantity)),
            }
        )
    return lines


def _load_owned_order(*, user, order_id) -> Order:
    try:
        order = Order.objects.select_related("user", "address").get(pk=order_id)
    except (Order.DoesNotExist, ValidationError, ValueError, TypeError):
        raise ReceiptNotFoundError(f"Order not found: {order_id}")

    if order.user_id != user.id:
        raise ReceiptOwnershipError("You do not have access to this order")
    return order


def get_or_create_receipt(*, user, order_id) -> tuple[Receipt, bool]:
    """Returns (receipt, created)."""
    order = _load_owned_order(user=user, order_id=order_id)

    existing = Receipt.objects.filter(order=order).first()
    if existing:
        return existing, False

    if order.user is None:
        raise ReceiptNotFoundError("User not found")
    if order.address is None:
        raise ReceiptNotFoundError("Address not found")

    address = order.address
    billing_info = {
        "customer_name": order.user.name,
        "customer_email": order.user.email,
        "billing_address": address.as_billing_dict(),
    }
    items = _snapshot_items(order)
    payment_details = {
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "transaction_id": order.payment_reference or None,
    }

    for attempt in range(1, MAX_NUMBERING_ATTEMPTS + 1):
        try:
            with transaction.atomic():
                receipt = Receipt.objects.create(
                    order=order,
                    user=order.user,
                    receipt_no=_next_receipt_no(),
                    billing_info=billing_info,
                    items=items,
                    payment_details=payment_details,
                    order_date=order.created_at,
                    subtotal=order.subtotal,
                    shipping=order.shipping,
                    tax=order.tax,
                    total=order.total,
                )
        except IntegrityError:
            existing = Receipt.objects.filter(order=order).first()
            if existing:
                return existing, False
            logger.info("Receipt number collision, retrying", extra={"attempt": attempt})
            continue

        logger.info(
            "Receipt generated",
            extra={"receipt_no": receipt.receipt_no, "order_id": str(order.id)},
        )
        return receipt, True

    raise ReceiptError("Could not allocate a receipt number, please try again")


def list_receipts(*, user):
    return Receipt.objects.filter(user=user).order_by("-generated_at")[:LIST_LIMIT]


def get_receipt(*, user, receipt_id) -> Receipt:
    try:
        receipt = Receipt.objects.get(pk=receipt_id)
    except (Receipt.DoesNotExist, ValidationError, ValueError, TypeError):
        raise ReceiptNotFoundError("Receipt not found")

    if receipt.user_id != user.id:
        raise ReceiptOwnershipError()
    return receipt


def get_receipt_for_order(*, user, order_id) -> Receipt:
    receipt = Receipt.objects.filter(order_id=order_id, user=user).first()
    if receipt is None:
        raise ReceiptNotFoundError("Receipt not found")
    return receipt
