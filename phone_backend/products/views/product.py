# products/views/product.py

"""
PRODUCT VIEWSET

Purpose:
- Public catalogue browsing (AllowAny, read-only)
- Seller (admin) catalogue management (create / edit / delete)

Key rules:
- Writes are admin-only; owner is stamped from the request user.
- A product that still sits on an open order (not delivered / cancelled)
  cannot be deleted: those orders would lose the line they reserved stock for.
"""

import logging

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.response import Response

from orders.models import OrderItem, OrderStatus
from orders.services import TERMINAL_STATUSES
from orders.views.errors import error_response
from products.filters import ProductFilter
from products.models import Product
from products.serializers import ProductSerializer, PublicProductSerializer
from users.permissions import IsAdminOrReadOnly

logger = logging.getLogger(__name__)

OPEN_ORDER_STATUSES = [s for s in OrderStatus.values if s not in TERMINAL_STATUSES]


class ProductViewSet(viewsets.ModelViewSet):
    """
    Product endpoints.

    Public:
    - GET /api/products/?search=<text>&brand=<brand>&in_stock=true
    - GET /api/products/<id>/

    Admin:
    - POST / PUT / PATCH / DELETE
    """

    queryset = Product.objects.all().order_by("-created_at")
    filterset_class = ProductFilter

    permission_classes = [IsAdminOrReadOnly]

    def get_serializer_class(self):
        user = getattr(self.request, "user", None)
        if self.action in ("list", "retrieve") and not getattr(user, "is_admin", False):
            return PublicProductSerializer
        return ProductSerializer

    @extend_schema(
        tags=["Products"],
        parameters=[
            OpenApiParameter(name="search", type=str, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="brand", type=str, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="in_stock", type=bool, location=OpenApiParameter.QUERY, required=False),
        ],
        description="Public catalogue browsing (paginated).",
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def perform_create(self, serializer):
        product = serializer.save(owner=self.request.user)
        logger.info(
            "Product created",
            extra={"product_id": str(product.id), "user_id": str(self.request.user.id)},
        )

    @extend_schema(
        tags=["Products"],
        responses={
            204: OpenApiResponse(description="Deleted"),
            409: OpenApiResponse(description="Product is referenced by an open order"),
        },
    )
    def destroy(self, request, *args, **kwargs):
        product = self.get_object()

        in_use = OrderItem.objects.filter(
            product_id=product.id,
            order__status__in=OPEN_ORDER_STATUSES,
        ).exists()

        if in_use:
            return error_response(
                code="product_in_use",
                message="Product is part of an open order and cannot be deleted",
                http_status=status.HTTP_409_CONFLICT,
            )

        product_id = str(product.id)
        product.delete()
        logger.info("Product deleted", extra={"product_id": product_id})
        return Response(status=status.HTTP_204_NO_CONTENT)
