from .address import Address, normalize_postal_code

__all__ = ["Address", "normalize_postal_code"]
