"""
ORDER LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed status transitions for Order.

DESIGN PRINCIPLES:
- No database writes
- No stock mutation
- No side effects
- Single source of truth

Progression is forward-only and may skip steps
(placed -> delivered is allowed); regressions are refused.
cancelled is reachable only from placed / processing.
"""

from orders.models import OrderStatus
from orders.services.errors import OrderError

# ============================================================
# DOMAIN ERRORS
# ============================================================


class InvalidOrderTransitionError(OrderError):
    code = "invalid_transition"
    http_status = 409


# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATUSES = {
    OrderStatus.DELIVERED.value,
    OrderStatus.CANCELLED.value,
}

CANCELLABLE_STATUSES = {
    OrderStatus.PLACED.value,
    OrderStatus.PROCESSING.value,
}

ALLOWED_TRANSITIONS = {
    OrderStatus.PLACED.value: {
        OrderStatus.PROCESSING.value,
        OrderStatus.SHIPPED.value,
        OrderStatus.DELIVERED.value,
        OrderStatus.CANCELLED.value,
    },
    OrderStatus.PROCESSING.value: {
        OrderStatus.SHIPPED.value,
        OrderStatus.DELIVERED.value,
        OrderStatus.CANCELLED.value,
    },
    OrderStatus.SHIPPED.value: {
        OrderStatus.DELIVERED.value,
    },
    OrderStatus.DELIVERED.value: set(),
    OrderStatus.CANCELLED.value: set(),
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    # enum members hash by name, so compare on plain values
    from_status, to_status = str(from_status), str(to_status)

    if from_status in TERMINAL_STATUSES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, order, target_status: str):
    if not can_transition(from_status=order.status, to_status=target_status):
        raise InvalidOrderTransitionError(
            f"Order {order.order_no} cannot transition from "
            f"'{order.status}' to '{target_status}'"
        )


def validate_cancellable(*, order):
    if str(order.status) not in CANCELLABLE_STATUSES:
        raise InvalidOrderTransitionError(
            f"Order cannot be cancelled: current status is '{order.status}'"
        )
