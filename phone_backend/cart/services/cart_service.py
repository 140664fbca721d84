# cart/services/cart_service.py

"""
CART SERVICE

The cart is a scratch list of (product, quantity) pairs. It reserves
nothing: stock is only checked and moved at order creation.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction

from cart.models import Cart, CartItem
from products.models import Product

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def get_cart(user) -> Cart:
    cart, _ = Cart.objects.get_or_create(user=user)
    return cart


@transaction.atomic
def replace_cart_items(*, user, items) -> Cart:
    """
    Replace the caller's cart contents.

    items: iterable of {"product_id": uuid, "quantity": int}; quantities of
    a repeated product are summed. Raises Product.DoesNotExist naming the
    first unknown id.
    """
    merged: dict[str, int] = {}
    for item in items:
        key = str(item["product_id"])
        merged[key] = merged.get(key, 0) + int(item["quantity"])

    products = {str(p.id): p for p in Product.objects.filter(id__in=list(merged.keys()))}
    for product_id in merged:
        if product_id not in products:
            raise Product.DoesNotExist(f"Product not found: {product_id}")

    cart = get_cart(user)
    cart.items.all().delete()
    CartItem.objects.bulk_create(
        [
            CartItem(cart=cart, product=products[product_id], quantity=quantity)
            for product_id, quantity in merged.items()
        ]
    )
    cart.save(update_fields=["updated_at"])

    logger.info("Cart replaced", extra={"user_id": str(user.id), "lines": len(merged)})
    return cart


def clear_cart(user) -> None:
    CartItem.objects.filter(cart__user=user).delete()


def cart_total(user) -> Decimal:
    """Sum of effective price x quantity over the caller's cart (no shipping/tax)."""
    total = Decimal("0.00")
    for item in CartItem.objects.filter(cart__user=user).select_related("product"):
        total += item.product.effective_price * item.quantity
    return total.quantize(TWOPLACES)
