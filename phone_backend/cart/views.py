# cart/views.py

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from cart.serializers import CartReplaceSerializer, CartSerializer
from cart.services import get_cart, replace_cart_items
from products.models import Product


class CartView(APIView):
    """
    GET /api/cart/  -> caller's cart
    PUT /api/cart/  -> replace cart contents
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Cart"], responses={200: CartSerializer})
    def get(self, request):
        cart = get_cart(request.user)
        return Response(CartSerializer(cart).data)

    @extend_schema(
        tags=["Cart"],
        request=CartReplaceSerializer,
        responses={
            200: CartSerializer,
            400: OpenApiResponse(description="Validation error"),
            404: OpenApiResponse(description="Unknown product"),
        },
    )
    def put(self, request):
        serializer = CartReplaceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            cart = replace_cart_items(user=request.user, items=serializer.validated_data["items"])
        except Product.DoesNotExist as exc:
            return Response(
                {"error": {"code": "product_not_found", "message": str(exc)}},
                status=status.HTTP_404_NOT_FOUND,
            )

        return Response(CartSerializer(cart).data)
