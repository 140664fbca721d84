# receipts/models.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class Receipt(models.Model):
    """
    Immutable financial snapshot of an order.

    - at most one per order (OneToOne)
    - receipt_no: RCP-YYYYMMDD-NNNN, sequence restarts every day
    - order_date, billing_info, items and payment_details are copied at generation time
      and never refreshed
    """

    STATUS_ACTIVE = "active"

    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.OneToOneField(
        "orders.Order",
        on_delete=models.PROTECT,
        related_name="receipt",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="receipts",
    )

    receipt_no = models.CharField(max_length=32, unique=True)

    billing_info = models.JSONField(default=dict)
    items = models.JSONField(default=list)
    payment_details = models.JSONField(default=dict)

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    shipping = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    tax = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    # when the order was placed, as opposed to when the receipt was generated
    order_date = models.DateTimeField(null=True, blank=True)

    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    generated_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-generated_at"]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Receipts are immutable once generated")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Receipts cannot be deleted")

    def __str__(self):
        return f"{self.receipt_no} | {self.total}"
