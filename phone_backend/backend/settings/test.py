# backend/settings/test.py
"""
TEST SETTINGS

- In-memory SQLite
- Fixed Stripe test secrets (no network: the HTTP client is patched in tests)
- No retry sleeps on order lookup
- Throttling disabled
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import PAYMENTS, REST_FRAMEWORK

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

PAYMENTS["STRIPE"].update(
    {
        "SECRET_KEY": "sk_test_storefront",
        "WEBHOOK_SECRET": "whsec_test_storefront",
        "WEBHOOK_TOLERANCE": 300,
        "CURRENCY": "npr",
    }
)

ORDER_LOOKUP_RETRY_DELAY = 0

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_CLASSES": (),
    "DEFAULT_THROTTLE_RATES": {
        "anon": "10000/min",
        "user": "10000/min",
        "checkout": "10000/min",
        "webhook": "10000/min",
    },
}
