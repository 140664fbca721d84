# receipts/serializers.py

from rest_framework import serializers

from receipts.models import Receipt


class ReceiptSerializer(serializers.ModelSerializer):
    order = serializers.UUIDField(source="order_id", read_only=True)
    order_no = serializers.CharField(source="order.order_no", read_only=True)

    class Meta:
        model = Receipt
        fields = [
            "id",
            "receipt_no",
            "order",
            "order_no",
            "billing_info",
            "items",
            "payment_details",
            "subtotal",
            "shipping",
            "tax",
            "total",
            "status",
            "order_date",
            "generated_at",
        ]
        read_only_fields = fields


class ReceiptCreateSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
