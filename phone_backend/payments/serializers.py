# payments/serializers.py

from rest_framework import serializers


class PaymentIntentRequestSerializer(serializers.Serializer):
    """
    Without order_id the intent is priced from the caller's cart
    (subtotal + shipping + tax, same formula as checkout).
    With order_id the intent is priced from the stored order total;
    a client-supplied amount must then match it.
    """

    order_id = serializers.UUIDField(required=False)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)


class PaymentIntentResponseSerializer(serializers.Serializer):
    id = serializers.CharField()
    client_secret = serializers.CharField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    currency = serializers.CharField()
    publishable_key = serializers.CharField()
