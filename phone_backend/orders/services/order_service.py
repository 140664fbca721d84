# orders/services/order_service.py

"""
ORDER SERVICE (APPLICATION SERVICE)

Purpose:
- Turn a list of (product, quantity) lines into an Order, reserving stock.
- Cancel (owner) / advance status (seller), releasing stock exactly once
  when an order enters cancelled.
- Mirror payment outcomes reported by the client or the processor webhook.

Hard rules:
- Quantities are whole units.
- Money is computed server-side, once, from then-current effective prices:
      subtotal = sum(effective_price * quantity)
      shipping = settings.ORDER_SHIPPING_FEE
      tax      = subtotal * settings.ORDER_TAX_RATE (2dp, half-up)
      total    = subtotal + shipping + tax
- Admission is all-or-nothing: every short line is reported together and
  no stock moves when any line is short.
- Status writes lock the order row (select_for_update) so a cancel racing a
  status change cannot release stock twice.
"""

from __future__ import annotations

import logging
import time
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction

from addresses.models import Address
from cart.services import clear_cart
from orders.models import Order, OrderItem, OrderStatus, PaymentMethod, PaymentStatus
from orders.services.errors import (
    InsufficientStockError,
    OrderNotFoundError,
    OrderOwnershipError,
    OrderValidationError,
    ProductNotFoundError,
)
from orders.services.order_lifecycle import (
    InvalidOrderTransitionError,
    validate_cancellable,
    validate_transition,
)
from products.models import Product
from products.services import StockLine, check_availability, release_stock, reserve_stock

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _to_int_qty(value) -> int:
    if isinstance(value, bool):
        raise OrderValidationError("quantity must be a whole integer unit")

    if isinstance(value, int):
        qty = value
    elif isinstance(value, str) and value.strip().isdigit():
        qty = int(value.strip())
    else:
        raise OrderValidationError("quantity must be a whole integer unit")

    if qty <= 0:
        raise OrderValidationError("quantity must be at least 1")
    return qty


def _is_admin(user) -> bool:
    return bool(getattr(user, "is_admin", False))


def _order_lines(order: Order) -> list[StockLine]:
    return [StockLine(item.product_id, item.quantity) for item in order.items.all()]


def _locked_order(order_id) -> Order:
    try:
        return Order.objects.select_for_update().get(pk=order_id)
    except (Order.DoesNotExist, ValidationError, ValueError, TypeError):
        raise OrderNotFoundError(order_id)


def _get_order(order_id) -> Order:
    try:
        return Order.objects.get(pk=order_id)
    except (Order.DoesNotExist, ValidationError, ValueError, TypeError):
        raise OrderNotFoundError(order_id)


def _check_owner(order: Order, user) -> None:
    if order.user_id != user.id:
        raise OrderOwnershipError()


# ============================================================
# PRICING
# ============================================================


def compute_totals(subtotal) -> tuple[Decimal, Decimal, Decimal, Decimal]:
    """(subtotal, shipping, tax, total) for a goods subtotal, using the configured fee and rate."""
    subtotal = _money(subtotal)
    shipping = _money(settings.ORDER_SHIPPING_FEE)
    tax = _money(subtotal * Decimal(str(settings.ORDER_TAX_RATE)))
    return subtotal, shipping, tax, subtotal + shipping + tax


# ============================================================
# CREATE
# ============================================================


@transaction.atomic
def create_order(
    *,
    user,
    address_id,
    items,
    payment_method: str,
    payment_reference: str | None = None,
) -> Order:
    """
    items: iterable of {"product_id": ..., "quantity": ...}

    Card orders are created after the client already confirmed payment, so
    they start as processing/completed; cash-on-delivery starts placed/pending.
    """
    items = list(items or [])
    if not items:
        raise OrderValidationError("Order must contain at least one item")

    if not address_id:
        raise OrderValidationError("A delivery address is required")

    if payment_method not in PaymentMethod.values:
        raise OrderValidationError(f"Unsupported payment method: {payment_method}")

    try:
        address = Address.objects.get(pk=address_id, user=user)
    except (Address.DoesNotExist, ValidationError, ValueError, TypeError):
        raise OrderValidationError("Delivery address not found")

    # Merge duplicate product lines so stock and totals see one line per product.
    merged: dict[str, int] = {}
    for item in items:
        key = str(item.get("product_id") or "").strip()
        if not key:
            raise OrderValidationError("product_id is required for every item")
        merged[key] = merged.get(key, 0) + _to_int_qty(item.get("quantity"))

    products = {}
    for product_id in merged:
        try:
            products[product_id] = Product.objects.get(pk=product_id)
        except (Product.DoesNotExist, ValidationError, ValueError, TypeError):
            raise ProductNotFoundError(product_id)

    lines = [StockLine(products[pid].id, qty) for pid, qty in merged.items()]

    shortages = check_availability(lines)
    if shortages:
        raise InsufficientStockError(shortages)

    subtotal, shipping, tax, total = compute_totals(
        sum((products[pid].effective_price * qty for pid, qty in merged.items()), Decimal("0.00"))
    )

    # Conditional decrements: a buyer admitted against a stale snapshot loses here.
    reserve_stock(lines)

    if payment_method == PaymentMethod.CARD:
        status, payment_status = OrderStatus.PROCESSING, PaymentStatus.COMPLETED
    else:
        status, payment_status = OrderStatus.PLACED, PaymentStatus.PENDING

    order = Order.objects.create(
        user=user,
        address=address,
        subtotal=subtotal,
        shipping=shipping,
        tax=tax,
        total=total,
        status=status,
        payment_method=payment_method,
        payment_status=payment_status,
        payment_reference=(payment_reference or "").strip(),
    )
    OrderItem.objects.bulk_create(
        [OrderItem(order=order, product_id=line.product_id, quantity=line.quantity) for line in lines]
    )

    clear_cart(user)

    logger.info(
        "Order created",
        extra={
            "order_id": str(order.id),
            "order_no": order.order_no,
            "user_id": str(user.id),
            "total": str(total),
            "payment_method": payment_method,
        },
    )
    return order


# ============================================================
# CANCEL (owner)
# ============================================================


@transaction.atomic
def cancel_order(*, user, order_id) -> Order:
    order = _locked_order(order_id)
    _check_owner(order, user)
    validate_cancellable(order=order)

    release_stock(_order_lines(order))

    order.status = OrderStatus.CANCELLED
    if order.payment_method == PaymentMethod.CARD:
        # captured card money is refunded outside this system
        order.payment_status = PaymentStatus.FAILED
    order.save(update_fields=["status", "payment_status", "updated_at"])

    logger.info(
        "Order cancelled",
        extra={"order_id": str(order.id), "user_id": str(user.id)},
    )
    return order


# ============================================================
# STATUS ADVANCE (seller)
# ============================================================


@transaction.atomic
def set_order_status(*, order_id, new_status: str) -> Order:
    new_status = str(new_status)
    if new_status not in OrderStatus.values:
        raise OrderValidationError(f"Unknown order status: {new_status}")

    order = _locked_order(order_id)

    if order.status == new_status:
        return order

    validate_transition(order=order, target_status=new_status)

    if new_status == OrderStatus.CANCELLED:
        release_stock(_order_lines(order))

    previous = order.status
    order.status = new_status
    order.save(update_fields=["status", "updated_at"])

    logger.info(
        "Order status changed",
        extra={"order_id": str(order.id), "from": previous, "to": new_status},
    )
    return order


# ============================================================
# PAYMENT OUTCOMES
# ============================================================


@transaction.atomic
def record_payment_success(*, order_id, payment_reference: str | None = None) -> Order:
    """
    Mark payment completed; advance placed -> processing.
    A processor reference also switches a cash-on-delivery order to card.
    Re-applying is a no-op apart from filling a missing reference.
    """
    order = _locked_order(order_id)

    fields = []
    if order.payment_status != PaymentStatus.COMPLETED:
        order.payment_status = PaymentStatus.COMPLETED
        fields.append("payment_status")

    reference = (payment_reference or "").strip()
    if reference and order.payment_reference != reference:
        order.payment_reference = reference
        fields.append("payment_reference")

    # a processor-confirmed charge makes the order a card order
    if reference and order.payment_method != PaymentMethod.CARD:
        order.payment_method = PaymentMethod.CARD
        fields.append("payment_method")

    if order.status == OrderStatus.PLACED:
        order.status = OrderStatus.PROCESSING
        fields.append("status")

    if fields:
        order.save(update_fields=fields + ["updated_at"])
        logger.info(
            "Payment recorded as completed",
            extra={"order_id": str(order.id), "fields": fields},
        )
    return order


@transaction.atomic
def record_payment_failure(*, order_id) -> Order:
    """Mark payment failed. Order status and stock are left alone."""
    order = _locked_order(order_id)

    if order.payment_status != PaymentStatus.FAILED:
        order.payment_status = PaymentStatus.FAILED
        order.save(update_fields=["payment_status", "updated_at"])
        logger.warning("Payment recorded as failed", extra={"order_id": str(order.id)})
    return order


def confirm_payment(*, user, order_id, payment_reference: str) -> Order:
    """Client-confirmed path: the caller reports a processor-confirmed charge."""
    reference = (payment_reference or "").strip()
    if not reference:
        raise OrderValidationError("payment_reference is required")

    order = get_order_for_user(user=user, order_id=order_id, owner_only=True)
    if order.status == OrderStatus.CANCELLED:
        raise InvalidOrderTransitionError("Cannot confirm payment for a cancelled order")

    return record_payment_success(order_id=order.id, payment_reference=reference)


# ============================================================
# READS
# ============================================================


def get_order_for_user(*, user, order_id, owner_only: bool = False) -> Order:
    try:
        order = Order.objects.select_related("address").prefetch_related("items").get(pk=order_id)
    except (Order.DoesNotExist, ValidationError, ValueError, TypeError):
        raise OrderNotFoundError(order_id)

    if owner_only or not _is_admin(user):
        _check_owner(order, user)
    return order


def get_order_with_retry(*, order_id, user=None, owner_only: bool = False) -> Order:
    """
    Look an order up, retrying a few times with a fixed delay.

    Used right after checkout, when the client may ask for a payment intent
    before the order row is visible to this connection.
    """
    attempts = max(1, int(getattr(settings, "ORDER_LOOKUP_RETRIES", 3)))
    delay = float(getattr(settings, "ORDER_LOOKUP_RETRY_DELAY", 1.0))

    for attempt in range(1, attempts + 1):
        try:
            if user is None:
                return _get_order(order_id)
            return get_order_for_user(user=user, order_id=order_id, owner_only=owner_only)
        except OrderNotFoundError:
            if attempt == attempts:
                break
            logger.info(
                "Order not visible yet, retrying",
                extra={"order_id": str(order_id), "attempt": attempt},
            )
            time.sleep(delay)

    raise OrderNotFoundError(order_id)


def list_orders(*, user, status: str | None = None, all_orders: bool = False):
    qs = Order.objects.select_related("address").prefetch_related("items")

    if not (all_orders and _is_admin(user)):
        qs = qs.filter(user=user)

    if status:
        if status not in OrderStatus.values:
            raise OrderValidationError(f"Unknown order status: {status}")
        qs = qs.filter(status=status)

    return qs.order_by("-created_at")
