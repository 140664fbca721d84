# orders/serializers.py

from rest_framework import serializers

from orders.models import Order, OrderItem, OrderStatus, PaymentMethod


class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = ["product_id", "quantity"]


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    user = serializers.UUIDField(source="user_id", read_only=True)
    address = serializers.UUIDField(source="address_id", read_only=True, allow_null=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_no",
            "user",
            "address",
            "items",
            "subtotal",
            "shipping",
            "tax",
            "total",
            "status",
            "payment_method",
            "payment_status",
            "payment_reference",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


# -----------------------------
# Inputs
# -----------------------------
class OrderLineInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class OrderCreateSerializer(serializers.Serializer):
    address_id = serializers.UUIDField()
    items = OrderLineInputSerializer(many=True, allow_empty=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices)
    payment_reference = serializers.CharField(required=False, allow_blank=True, max_length=255)

    def validate(self, attrs):
        if attrs["payment_method"] == PaymentMethod.CARD and not (attrs.get("payment_reference") or "").strip():
            raise serializers.ValidationError(
                {"payment_reference": "Card orders require the confirmed payment reference"}
            )
        return attrs


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)


class PaymentConfirmSerializer(serializers.Serializer):
    payment_reference = serializers.CharField(max_length=255)
