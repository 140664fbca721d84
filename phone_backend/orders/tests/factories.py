# orders/tests/factories.py

from decimal import Decimal

from addresses.models import Address
from products.models import Product
from users.models import User


def make_user(email="buyer@example.com", **extra):
    return User.objects.create_user(email=email, password="pass12345", **extra)


def make_admin(email="seller@example.com"):
    return User.objects.create_user(email=email, password="pass12345", role="admin")


def make_address(user, **overrides):
    data = {
        "user": user,
        "full_name": "Asha Rai",
        "phone_number": "9800000000",
        "street_address": "12 Lakeside Rd",
        "city": "Pokhara",
        "state": "Gandaki",
        "postal_code": "33700",
        "is_default": True,
    }
    data.update(overrides)
    return Address.objects.create(**data)


def make_product(name="Pixel 9", price="800.00", offer_price=None, stock=3, brand="Google"):
    return Product.objects.create(
        name=name,
        description=f"{name} phone",
        brand=brand,
        price=Decimal(price),
        offer_price=Decimal(offer_price) if offer_price else None,
        stock=stock,
        images=["https://img.example.com/phone.png"],
    )
