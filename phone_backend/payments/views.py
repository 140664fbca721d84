# payments/views.py

from __future__ import annotations

import logging
from decimal import Decimal

from django.conf import settings
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle, UserRateThrottle
from rest_framework.views import APIView

from cart.services import cart_total
from orders.models import PaymentStatus
from orders.services import OrderError, compute_totals, get_order_with_retry
from orders.views.errors import domain_error_response, error_response
from payments.serializers import PaymentIntentRequestSerializer, PaymentIntentResponseSerializer
from payments.services import (
    PaymentProviderError,
    SignatureVerificationError,
    apply_payment_event,
    construct_event,
    create_payment_intent,
)

logger = logging.getLogger(__name__)


class CheckoutRateThrottle(UserRateThrottle):
    scope = "checkout"


class WebhookThrottle(AnonRateThrottle):
    scope = "webhook"


class PaymentIntentView(APIView):
    """
    POST /api/payments/intent/
    """

    permission_classes = [IsAuthenticated]
    throttle_classes = [CheckoutRateThrottle]

    @extend_schema(
        tags=["Payments"],
        request=PaymentIntentRequestSerializer,
        responses={
            200: PaymentIntentResponseSerializer,
            400: OpenApiResponse(description="Empty cart or amount mismatch"),
            404: OpenApiResponse(description="Order not found"),
            409: OpenApiResponse(description="Order already paid"),
            502: OpenApiResponse(description="Payment processor unavailable, try again"),
        },
    )
    def post(self, request):
        serializer = PaymentIntentRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        metadata = {"user_id": str(request.user.id)}

        if data.get("order_id"):
            try:
                order = get_order_with_retry(
                    order_id=data["order_id"], user=request.user, owner_only=True
                )
            except OrderError as exc:
                return domain_error_response(exc)

            if order.payment_status == PaymentStatus.COMPLETED:
                return error_response(
                    code="already_paid",
                    message="Order is already paid",
                    http_status=status.HTTP_409_CONFLICT,
                )

            amount = order.total
            if data.get("amount") is not None and Decimal(data["amount"]) != amount:
                return error_response(
                    code="amount_mismatch",
                    message="Amount does not match the order total",
                    http_status=status.HTTP_400_BAD_REQUEST,
                )
            metadata["order_id"] = str(order.id)
        else:
            subtotal = cart_total(request.user)
            if subtotal <= Decimal("0.00"):
                return error_response(
                    code="empty_cart",
                    message="Cart is empty",
                    http_status=status.HTTP_400_BAD_REQUEST,
                )
            amount = compute_totals(subtotal)[3]

        try:
            intent = create_payment_intent(amount=amount, metadata=metadata)
        except PaymentProviderError as exc:
            logger.exception("Payment intent creation failed", extra={"user_id": str(request.user.id)})
            return error_response(
                code=exc.code,
                message="Payment provider unavailable, please try again",
                http_status=exc.http_status,
            )

        return Response(
            {
                "id": intent["id"],
                "client_secret": intent["client_secret"],
                "amount": str(amount),
                "currency": intent["currency"],
                "publishable_key": settings.PAYMENTS["STRIPE"].get("PUBLISHABLE_KEY", ""),
            },
            status=status.HTTP_200_OK,
        )


class StripeWebhookView(APIView):
    """
    POST /api/payments/stripe/webhook/

    Answers 400 only when the signature does not verify (nothing is touched).
    Once verified, always acknowledges with 200; processing errors are logged.
    """

    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_classes = [WebhookThrottle]

    @extend_schema(
        tags=["Payments"],
        request=None,
        responses={
            200: OpenApiResponse(description="Acknowledged"),
            400: OpenApiResponse(description="Invalid signature"),
        },
    )
    def post(self, request, *args, **kwargs):
        raw_body = request.body or b""
        signature = request.headers.get("stripe-signature")

        logger.info("Stripe webhook received")

        try:
            event = construct_event(payload=raw_body, sig_header=signature)
        except SignatureVerificationError as exc:
            logger.warning("Invalid Stripe signature", extra={"reason": str(exc)})
            return error_response(
                code=exc.code,
                message="Invalid signature",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            outcome = apply_payment_event(event)
        except Exception:
            logger.exception("Unhandled webhook error", extra={"event_id": event.id})
            return Response({"received": True, "detail": "Error logged"}, status=status.HTTP_200_OK)

        return Response({"received": True, "detail": outcome}, status=status.HTTP_200_OK)
