from .errors import (
    InsufficientStockError,
    OrderError,
    OrderNotFoundError,
    OrderOwnershipError,
    OrderValidationError,
    ProductNotFoundError,
)
from .order_lifecycle import (
    CANCELLABLE_STATUSES,
    TERMINAL_STATUSES,
    InvalidOrderTransitionError,
    can_transition,
    validate_transition,
)
from .order_service import (
    cancel_order,
    compute_totals,
    confirm_payment,
    create_order,
    get_order_for_user,
    get_order_with_retry,
    list_orders,
    record_payment_failure,
    record_payment_success,
    set_order_status,
)

__all__ = [
    "CANCELLABLE_STATUSES",
    "TERMINAL_STATUSES",
    "InsufficientStockError",
    "InvalidOrderTransitionError",
    "OrderError",
    "OrderNotFoundError",
    "OrderOwnershipError",
    "OrderValidationError",
    "ProductNotFoundError",
    "can_transition",
    "cancel_order",
    "compute_totals",
    "confirm_payment",
    "create_order",
    "get_order_for_user",
    "get_order_with_retry",
    "list_orders",
    "record_payment_failure",
    "record_payment_success",
    "set_order_status",
    "validate_transition",
]
