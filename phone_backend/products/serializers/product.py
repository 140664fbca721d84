# products/serializers/product.py

from decimal import Decimal

from rest_framework import serializers

from products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """
    Admin catalogue serializer (read/write).

    Rules:
    - price > 0; offer_price optional but > 0 and <= price when supplied
    - stock is a whole number >= 0
    - images is a list of hosted image URLs (at least one on create)
    - owner is stamped server-side from the request user
    """

    images = serializers.ListField(child=serializers.URLField(), allow_empty=False)
    effective_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, read_only=True
    )
    owner = serializers.UUIDField(source="owner_id", read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "owner",
            "name",
            "description",
            "brand",
            "price",
            "offer_price",
            "effective_price",
            "stock",
            "images",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "owner", "effective_price", "created_at", "updated_at"]

    def validate_price(self, value):
        if value is None or value <= Decimal("0.00"):
            raise serializers.ValidationError("Price must be greater than zero")
        return value

    def validate_stock(self, value):
        if value is None or int(value) < 0:
            raise serializers.ValidationError("Stock cannot be negative")
        return value

    def validate(self, attrs):
        price = attrs.get("price", getattr(self.instance, "price", None))
        offer = attrs.get("offer_price", getattr(self.instance, "offer_price", None))

        if offer is not None:
            if offer <= Decimal("0.00"):
                raise serializers.ValidationError({"offer_price": "Offer price must be greater than zero"})
            if price is not None and offer > price:
                raise serializers.ValidationError({"offer_price": "Offer price cannot exceed price"})

        return attrs


class PublicProductSerializer(serializers.ModelSerializer):
    """Storefront (read-only) view of a product."""

    effective_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, read_only=True
    )

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "brand",
            "price",
            "offer_price",
            "effective_price",
            "stock",
            "images",
        ]
        read_only_fields = fields
