# products/services/stock_ledger.py

"""
STOCK LEDGER SERVICE

Purpose:
- Admission check for a batch of order lines (all-or-nothing).
- Reserve stock at order creation, release it on cancellation.

Rules:
- Product.stock is never persisted negative.
- Every decrement is a single conditional UPDATE:
      UPDATE product SET stock = stock - n WHERE id = ? AND stock >= n
  so two orders racing for the last unit cannot both win.
- A batch is all-or-nothing: if any line's conditional decrement matches
  no row, the lines already decremented in the same batch are put back
  (compensating increments) and InsufficientStockError is raised.
- Releases are unconditional atomic increments (F expressions).
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Iterable

from django.db.models import F

from products.models import Product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StockLine:
    product_id: object
    quantity: int


@dataclass(frozen=True)
class StockShortage:
    product_id: str
    name: str
    requested: int
    available: int

    def as_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "requested": self.requested,
            "available": self.available,
        }

    def __str__(self):
        return f"{self.name}: requested {self.requested}, available {self.available}"


class InsufficientStockError(Exception):
    """Raised when one or more lines ask for more units than are on hand."""

    def __init__(self, shortages: list[StockShortage]):
        self.shortages = list(shortages)
        detail = ", ".join(str(s) for s in self.shortages)
        super().__init__(f"Insufficient stock: {detail}")


def _merge_lines(lines: Iterable[StockLine]) -> "OrderedDict[str, int]":
    """Sum quantities per product so one product listed twice is checked once."""
    merged: "OrderedDict[str, int]" = OrderedDict()
    for line in lines:
        key = str(line.product_id)
        merged[key] = merged.get(key, 0) + int(line.quantity)
    return merged


def check_availability(lines: Iterable[StockLine]) -> list[StockShortage]:
    """
    Read-only admission check.

    Returns every offending line (empty list means admitted).
    Products that do not exist are the caller's concern; they are skipped here.
    """
    merged = _merge_lines(lines)
    products = {str(p.id): p for p in Product.objects.filter(id__in=list(merged.keys()))}

    shortages = []
    for product_id, requested in merged.items():
        product = products.get(product_id)
        if product is None:
            continue
        if int(product.stock) < requested:
            shortages.append(
                StockShortage(
                    product_id=str(product.id),
                    name=product.name,
                    requested=requested,
                    available=int(product.stock),
                )
            )
    return shortages


def reserve_stock(lines: Iterable[StockLine]) -> None:
    """
    Decrement stock for every line, or for none of them.
    """
    merged = _merge_lines(lines)
    applied: list[tuple[str, int]] = []

    for product_id, quantity in merged.items():
        updated = Product.objects.filter(id=product_id, stock__gte=quantity).update(
            stock=F("stock") - quantity
        )
        if updated:
            applied.append((product_id, quantity))
            continue

        # roll back the part of the batch that already went through
        for done_id, done_qty in applied:
            Product.objects.filter(id=done_id).update(stock=F("stock") + done_qty)

        product = Product.objects.filter(id=product_id).only("id", "name", "stock").first()
        available = int(product.stock) if product else 0
        name = product.name if product else "Unknown Product"

        logger.warning(
            "Stock reservation lost a race",
            extra={"product_id": product_id, "requested": quantity, "available": available},
        )
        raise InsufficientStockError(
            [StockShortage(product_id=product_id, name=name, requested=quantity, available=available)]
        )

    logger.info("Stock reserved", extra={"lines": len(applied)})


def release_stock(lines: Iterable[StockLine]) -> None:
    """
    Put units back (order cancelled). Lines for deleted products are skipped.
    """
    for product_id, quantity in _merge_lines(lines).items():
        Product.objects.filter(id=product_id).update(stock=F("stock") + quantity)

    logger.info("Stock released")
