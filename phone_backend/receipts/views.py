# receipts/views.py

"""
RECEIPT ENDPOINTS

- GET  /api/receipts/                    latest receipts of the caller
- POST /api/receipts/                    get-or-create for {"order_id"}
- GET  /api/receipts/<id>/               one receipt (owner only)
- GET  /api/receipts/order/<order_id>/   receipt of an order (owner only)
"""

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.views.errors import domain_error_response
from receipts.serializers import ReceiptCreateSerializer, ReceiptSerializer
from receipts.services import (
    ReceiptError,
    get_or_create_receipt,
    get_receipt,
    get_receipt_for_order,
    list_receipts,
)


class ReceiptListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Receipts"], responses={200: ReceiptSerializer(many=True)})
    def get(self, request):
        receipts = list_receipts(user=request.user)
        return Response(ReceiptSerializer(receipts, many=True).data)

    @extend_schema(
        tags=["Receipts"],
        request=ReceiptCreateSerializer,
        responses={
            200: OpenApiResponse(response=ReceiptSerializer, description="Existing receipt"),
            201: OpenApiResponse(response=ReceiptSerializer, description="Generated"),
            403: OpenApiResponse(description="Not your order"),
            404: OpenApiResponse(description="Order, user or address not found"),
        },
    )
    def post(self, request):
        serializer = ReceiptCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            receipt, created = get_or_create_receipt(
                user=request.user, order_id=serializer.validated_data["order_id"]
            )
        except ReceiptError as exc:
            return domain_error_response(exc)

        return Response(
            ReceiptSerializer(receipt).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class ReceiptDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Receipts"], responses={200: ReceiptSerializer})
    def get(self, request, receipt_id):
        try:
            receipt = get_receipt(user=request.user, receipt_id=receipt_id)
        except ReceiptError as exc:
            return domain_error_response(exc)
        return Response(ReceiptSerializer(receipt).data)


class OrderReceiptView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Receipts"], responses={200: ReceiptSerializer})
    def get(self, request, order_id):
        try:
            receipt = get_receipt_for_order(user=request.user, order_id=order_id)
        except ReceiptError as exc:
            return domain_error_response(exc)
        return Response(ReceiptSerializer(receipt).data)
