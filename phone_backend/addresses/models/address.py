# addresses/models/address.py

"""
DELIVERY ADDRESS

Rules:
- owned by exactly one user; only that user may read or change it
- postal code: 5 digits or ZIP+4 ("12345-6789"); spaces are ignored,
  an all-zero code is rejected
- at most one default address per user: saving one with is_default=True
  clears the flag on every other address of the same user (same transaction)
"""

import re
import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models, transaction

POSTAL_CODE_RE = re.compile(r"^\d{5}(-\d{4})?$")


def normalize_postal_code(value) -> str:
    """Strip whitespace and validate; returns the cleaned code or raises ValidationError."""
    code = re.sub(r"\s+", "", str(value or ""))

    if not POSTAL_CODE_RE.match(code):
        raise ValidationError("Postal code must be 5 digits or 5+4 digits (12345-6789)")

    if set(code.replace("-", "")) == {"0"}:
        raise ValidationError("Postal code cannot be all zeros")

    return code


class Address(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="addresses",
    )

    full_name = models.CharField(max_length=150)
    phone_number = models.CharField(max_length=32)
    street_address = models.CharField(max_length=255)
    city = models.CharField(max_length=120)
    state = models.CharField(max_length=120)
    postal_code = models.CharField(max_length=10)

    is_default = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-is_default", "-created_at"]

    def __str__(self):
        return f"{self.full_name}, {self.street_address}, {self.city} {self.postal_code}"

    def clean(self):
        try:
            self.postal_code = normalize_postal_code(self.postal_code)
        except ValidationError as exc:
            raise ValidationError({"postal_code": exc.messages})

    def save(self, *args, **kwargs):
        with transaction.atomic():
            if self.is_default:
                Address.objects.filter(user_id=self.user_id, is_default=True).exclude(
                    pk=self.pk
                ).update(is_default=False)
            super().save(*args, **kwargs)

    def as_billing_dict(self) -> dict:
        return {
            "full_name": self.full_name,
            "street_address": self.street_address,
            "city": self.city,
            "state": self.state,
            "postal_code": self.postal_code,
            "phone_number": self.phone_number,
        }
