from .cart_service import cart_total, clear_cart, get_cart, replace_cart_items

__all__ = [
    "cart_total",
    "clear_cart",
    "get_cart",
    "replace_cart_items",
]
