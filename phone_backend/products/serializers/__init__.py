from .product import ProductSerializer, PublicProductSerializer

__all__ = [
    "ProductSerializer",
    "PublicProductSerializer",
]
