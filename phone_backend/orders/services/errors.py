# orders/services/errors.py

"""
ORDER DOMAIN ERRORS

Each error carries the HTTP status and machine code the API layer
answers with, so views translate them without a lookup table.
"""

from products.services import InsufficientStockError  # noqa: F401  (re-exported)


class OrderError(Exception):
    code = "order_error"
    http_status = 400


class OrderValidationError(OrderError):
    code = "validation_error"
    http_status = 400


class ProductNotFoundError(OrderError):
    code = "product_not_found"
    http_status = 404

    def __init__(self, product_id):
        self.product_id = str(product_id)
        super().__init__(f"Product not found: {self.product_id}")


class OrderNotFoundError(OrderError):
    code = "order_not_found"
    http_status = 404

    def __init__(self, order_id):
        self.order_id = str(order_id)
        super().__init__(f"Order not found: {self.order_id}")


class OrderOwnershipError(OrderError):
    code = "forbidden"
    http_status = 403

    def __init__(self, message="You do not have access to this order"):
        super().__init__(message)
