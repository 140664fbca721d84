# products/models/product.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class Product(models.Model):
    """
    Represents a sellable phone listing.

    STOCK MODEL (IMPORTANT):
    - stock is the authoritative count of sellable units
    - it is service-managed: only products.services.stock_ledger moves it
      (order creation reserves, cancellation releases); admins may overwrite
      it through the catalogue edit endpoint
    - the DB refuses negative values (check constraint)

    PRICING:
    - price is the list price
    - offer_price (optional) is the discounted price; when present it wins
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )

    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField()
    brand = models.CharField(max_length=120, db_index=True)

    price = models.DecimalField(max_digits=12, decimal_places=2)
    offer_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    stock = models.PositiveIntegerField(default=0)

    # Hosted image URLs (media host is external)
    images = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name="product_stock_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.brand})"

    def clean(self):
        if self.price is None or Decimal(self.price) <= 0:
            raise ValidationError({"price": "Price must be greater than zero"})

        if self.offer_price is not None and Decimal(self.offer_price) <= 0:
            raise ValidationError({"offer_price": "Offer price must be greater than zero"})

        if self.stock is None or int(self.stock) < 0:
            raise ValidationError({"stock": "Stock cannot be negative"})

        if not isinstance(self.images, list):
            raise ValidationError({"images": "images must be a list of URLs"})

    @property
    def effective_price(self) -> Decimal:
        """Discounted price if present, else list price."""
        if self.offer_price:
            return Decimal(self.offer_price)
        return Decimal(self.price)
