# orders/models/order_item.py

from django.db import models


class OrderItem(models.Model):
    """
    Snapshot line of an order.

    product_id is a loose reference (no FK): the product may be repriced or
    deleted later without touching the order.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product_id = models.UUIDField(db_index=True)
    quantity = models.PositiveIntegerField()

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="order_item_quantity_positive",
            ),
        ]

    def __str__(self):
        return f"{self.product_id} x {self.quantity}"
