# orders/views/order.py

"""
ORDER ENDPOINTS

- GET  /api/orders/                  own orders (?status=...), ?all=true for admins
- POST /api/orders/                  checkout
- GET  /api/orders/<id>/             detail (owner or admin)
- POST /api/orders/<id>/cancel/      owner cancel
- POST /api/orders/<id>/status/      admin status change
- POST /api/orders/<id>/payment/     client-confirmed payment
"""

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle
from rest_framework.views import APIView

from orders.serializers import (
    OrderCreateSerializer,
    OrderSerializer,
    OrderStatusUpdateSerializer,
    PaymentConfirmSerializer,
)
from orders.services import (
    InsufficientStockError,
    OrderError,
    cancel_order,
    confirm_payment,
    create_order,
    get_order_for_user,
    list_orders,
    set_order_status,
)
from orders.views.errors import domain_error_response
from users.permissions import IsAdmin


class CheckoutRateThrottle(UserRateThrottle):
    scope = "checkout"


class OrderListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get_throttles(self):
        if self.request.method == "POST":
            return [CheckoutRateThrottle()]
        return super().get_throttles()

    @extend_schema(
        tags=["Orders"],
        parameters=[
            OpenApiParameter(name="status", type=str, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(
                name="all",
                type=bool,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Admins only: list every customer's orders.",
            ),
        ],
        responses={200: OrderSerializer(many=True)},
    )
    def get(self, request):
        all_orders = (request.query_params.get("all") or "").strip().lower() in {"1", "true", "yes"}
        try:
            qs = list_orders(
                user=request.user,
                status=(request.query_params.get("status") or "").strip() or None,
                all_orders=all_orders,
            )
        except OrderError as exc:
            return domain_error_response(exc)

        paginator = PageNumberPagination()
        page = paginator.paginate_queryset(qs, request, view=self)
        return paginator.get_paginated_response(OrderSerializer(page, many=True).data)

    @extend_schema(
        tags=["Orders"],
        request=OrderCreateSerializer,
        responses={
            201: OrderSerializer,
            400: OpenApiResponse(description="Validation error"),
            404: OpenApiResponse(description="Unknown product"),
            409: OpenApiResponse(description="Insufficient stock (every short item listed)"),
        },
    )
    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            order = create_order(
                user=request.user,
                address_id=data["address_id"],
                items=data["items"],
                payment_method=data["payment_method"],
                payment_reference=data.get("payment_reference"),
            )
        except (OrderError, InsufficientStockError) as exc:
            return domain_error_response(exc)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Orders"], responses={200: OrderSerializer})
    def get(self, request, order_id):
        try:
            order = get_order_for_user(user=request.user, order_id=order_id)
        except OrderError as exc:
            return domain_error_response(exc)
        return Response(OrderSerializer(order).data)


class OrderCancelView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Orders"],
        request=None,
        responses={
            200: OrderSerializer,
            403: OpenApiResponse(description="Not your order"),
            409: OpenApiResponse(description="Order is past the cancellable stage"),
        },
    )
    def post(self, request, order_id):
        try:
            order = cancel_order(user=request.user, order_id=order_id)
        except OrderError as exc:
            return domain_error_response(exc)
        return Response(OrderSerializer(order).data)


class OrderStatusView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    @extend_schema(
        tags=["Orders"],
        request=OrderStatusUpdateSerializer,
        responses={
            200: OrderSerializer,
            409: OpenApiResponse(description="Transition not allowed"),
        },
    )
    def post(self, request, order_id):
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = set_order_status(order_id=order_id, new_status=serializer.validated_data["status"])
        except OrderError as exc:
            return domain_error_response(exc)
        return Response(OrderSerializer(order).data)


class OrderPaymentConfirmView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Orders"],
        request=PaymentConfirmSerializer,
        responses={200: OrderSerializer},
    )
    def post(self, request, order_id):
        serializer = PaymentConfirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = confirm_payment(
                user=request.user,
                order_id=order_id,
                payment_reference=serializer.validated_data["payment_reference"],
            )
        except OrderError as exc:
            return domain_error_response(exc)
        return Response(OrderSerializer(order).data)
