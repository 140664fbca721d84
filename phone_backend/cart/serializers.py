# cart/serializers.py

from rest_framework import serializers

from cart.models import Cart, CartItem


class CartItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(source="product.id", read_only=True)
    name = serializers.CharField(source="product.name", read_only=True)
    unit_price = serializers.DecimalField(
        source="product.effective_price", max_digits=12, decimal_places=2, read_only=True
    )

    class Meta:
        model = CartItem
        fields = ["product_id", "name", "unit_price", "quantity"]


class CartSerializer(serializers.ModelSerializer):
    items = CartItemSerializer(many=True, read_only=True)

    class Meta:
        model = Cart
        fields = ["id", "items", "updated_at"]


class CartLineInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class CartReplaceSerializer(serializers.Serializer):
    items = CartLineInputSerializer(many=True, allow_empty=True)
