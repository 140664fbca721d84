from .stock_ledger import (
    InsufficientStockError,
    StockLine,
    StockShortage,
    check_availability,
    release_stock,
    reserve_stock,
)

__all__ = [
    "InsufficientStockError",
    "StockLine",
    "StockShortage",
    "check_availability",
    "release_stock",
    "reserve_stock",
]
