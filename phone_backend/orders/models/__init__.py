from .order import Order, OrderStatus, PaymentMethod, PaymentStatus
from .order_item import OrderItem

__all__ = [
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentMethod",
    "PaymentStatus",
]
