"""
Products models export surface.
"""

from .product import Product

__all__ = [
    "Product",
]
