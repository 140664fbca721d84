# orders/views/errors.py

"""
Consistent error payloads for the storefront API:

    {"error": {"code": "...", "message": "...", ...}}
"""

from rest_framework import status
from rest_framework.response import Response

from products.services import InsufficientStockError


def error_response(*, code: str, message: str, http_status: int, **extra):
    body = {"code": code, "message": message}
    body.update(extra)
    return Response({"error": body}, status=http_status)


def domain_error_response(exc: Exception):
    """Translate a service-layer error into an API response."""
    if isinstance(exc, InsufficientStockError):
        return error_response(
            code="insufficient_stock",
            message=str(exc),
            http_status=status.HTTP_409_CONFLICT,
            items=[s.as_dict() for s in exc.shortages],
        )

    return error_response(
        code=getattr(exc, "code", "error"),
        message=str(exc),
        http_status=getattr(exc, "http_status", status.HTTP_400_BAD_REQUEST),
    )
