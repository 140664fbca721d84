from .order import (
    OrderCancelView,
    OrderDetailView,
    OrderListCreateView,
    OrderPaymentConfirmView,
    OrderStatusView,
)

__all__ = [
    "OrderCancelView",
    "OrderDetailView",
    "OrderListCreateView",
    "OrderPaymentConfirmView",
    "OrderStatusView",
]
