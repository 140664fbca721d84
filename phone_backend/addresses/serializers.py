# addresses/serializers.py

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from addresses.models import Address, normalize_postal_code


class AddressSerializer(serializers.ModelSerializer):
    class Meta:
        model = Address
        fields = [
            "id",
            "full_name",
            "phone_number",
            "street_address",
            "city",
            "state",
            "postal_code",
            "is_default",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_postal_code(self, value):
        try:
            return normalize_postal_code(value)
        except DjangoValidationError as exc:
            raise serializers.ValidationError(exc.messages)

    def validate_full_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Full name is required")
        return value
