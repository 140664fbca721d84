# payments/services/stripe.py

"""
STRIPE CLIENT (REST over urllib)

- create_payment_intent(): POST /v1/payment_intents (form-encoded, minor units)
- construct_event(): verify a webhook body against the Stripe-Signature
  header and return a VerifiedEvent

Signature scheme:
    Stripe-Signature: t=<unix ts>,v1=<hex hmac>[,v1=...]
    expected = HMAC_SHA256(secret, f"{t}.{raw_body}")
The timestamp must be within the configured tolerance.

VerifiedEvent can only be built by construct_event(); code that consumes
payment events takes a VerifiedEvent, so an unverified body cannot reach it.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from django.conf import settings

from payments.services.errors import PaymentProviderError, SignatureVerificationError

logger = logging.getLogger(__name__)

STRIPE_BASE = "https://api.stripe.com"

# Currencies Stripe charges in whole units (no minor unit)
ZERO_DECIMAL_CURRENCIES = {"bif", "clp", "djf", "gnf", "jpy", "kmf", "krw", "mga", "pyg", "rwf", "ugx", "vnd", "vuv", "xaf", "xof", "xpf"}


def _stripe_cfg() -> dict:
    payments = getattr(settings, "PAYMENTS", {}) or {}
    cfg = payments.get("STRIPE") if isinstance(payments, dict) else None
    return cfg if isinstance(cfg, dict) else {}


def _get_secret_key() -> str:
    sk = (_stripe_cfg().get("SECRET_KEY") or "").strip()
    if not sk:
        raise PaymentProviderError(
            "Stripe SECRET_KEY is not configured. Expected settings.PAYMENTS['STRIPE']['SECRET_KEY']."
        )
    return sk


def default_currency() -> str:
    return (_stripe_cfg().get("CURRENCY") or "npr").strip().lower()


def _to_minor_units(amount, currency: str) -> int:
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValueError("amount must be a valid Decimal") from exc

    if value <= 0:
        raise ValueError("amount must be greater than zero")

    factor = Decimal("1") if currency.lower() in ZERO_DECIMAL_CURRENCIES else Decimal("100")
    return int((value * factor).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _flatten(params: dict, prefix: str = "") -> list[tuple[str, str]]:
    """Stripe's bracket notation: {"metadata": {"a": 1}} -> metadata[a]=1"""
    out: list[tuple[str, str]] = []
    for key, value in params.items():
        name = f"{prefix}[{key}]" if prefix else str(key)
        if isinstance(value, dict):
            out.extend(_flatten(value, name))
        elif isinstance(value, bool):
            out.append((name, "true" if value else "false"))
        elif value is not None:
            out.append((name, str(value)))
    return out


def _request_json(method: str, path: str, *, params: dict | None = None, timeout: int = 25) -> dict[str, Any]:
    sk = _get_secret_key()
    data = urlencode(_flatten(params)).encode("utf-8") if params is not None else None

    req = Request(
        f"{STRIPE_BASE}{path}",
        data=data,
        headers={
            "Authorization": f"Bearer {sk}",
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        },
        method=method,
    )

    try:
        with urlopen(req, timeout=timeout) as resp:
            raw = resp.read().decode("utf-8", errors="replace")
    except HTTPError as e:
        try:
            body = json.loads(e.read().decode("utf-8", errors="replace") or "{}")
        except ValueError:
            body = {}
        message = ((body.get("error") or {}).get("message") if isinstance(body, dict) else None) or "Stripe rejected request"
        raise PaymentProviderError(f"Stripe HTTPError: {e.code} {message}") from e
    except URLError as e:
        raise PaymentProviderError(f"Stripe URLError: {e}") from e

    try:
        parsed = json.loads(raw)
    except ValueError as e:
        raise PaymentProviderError("Stripe returned non-JSON") from e

    if not isinstance(parsed, dict):
        raise PaymentProviderError("Stripe returned an unexpected payload")
    return parsed


def create_payment_intent(*, amount, currency: str | None = None, metadata: dict | None = None) -> dict:
    """
    Returns {"id", "client_secret", "amount", "currency"}.
    amount is in major units (Decimal); it is converted to minor units here.
    """
    currency = (currency or default_currency()).lower()
    params = {
        "amount": _to_minor_units(amount, currency),
        "currency": currency,
        "automatic_payment_methods": {"enabled": True},
        "metadata": {k: str(v) for k, v in (metadata or {}).items()},
    }

    raw = _request_json("POST", "/v1/payment_intents", params=params)

    intent_id = str(raw.get("id") or "").strip()
    client_secret = str(raw.get("client_secret") or "").strip()
    if not intent_id or not client_secret:
        raise PaymentProviderError("Stripe response missing id/client_secret")

    logger.info(
        "Payment intent created",
        extra={"intent_id": intent_id, "amount_minor": params["amount"], "currency": currency},
    )
    return {
        "id": intent_id,
        "client_secret": client_secret,
        "amount": params["amount"],
        "currency": currency,
    }


# ============================================================
# WEBHOOK VERIFICATION
# ============================================================

_CONSTRUCT_TOKEN = object()


class VerifiedEvent:
    """A webhook event whose signature has been checked."""

    __slots__ = ("id", "type", "data")

    def __init__(self, *, _token, id: str, type: str, data: dict):
        if _token is not _CONSTRUCT_TOKEN:
            raise TypeError("VerifiedEvent is created by construct_event() only")
        self.id = id
        self.type = type
        self.data = data

    @property
    def object(self) -> dict:
        obj = (self.data or {}).get("object")
        return obj if isinstance(obj, dict) else {}

    def __repr__(self):
        return f"VerifiedEvent(id={self.id!r}, type={self.type!r})"


def _parse_signature_header(header: str) -> tuple[int, list[str]]:
    timestamp = None
    signatures = []
    for part in (header or "").split(","):
        key, sep, value = part.strip().partition("=")
        if not sep:
            continue
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError:
                raise SignatureVerificationError("Malformed signature timestamp")
        elif key == "v1":
            signatures.append(value.strip())

    if timestamp is None or not signatures:
        raise SignatureVerificationError("Signature header missing t or v1")
    return timestamp, signatures


def compute_signature(*, payload: bytes, timestamp: int, secret: str) -> str:
    signed = f"{timestamp}.".encode("utf-8") + payload
    return hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()


def construct_event(
    *,
    payload: bytes,
    sig_header: str | None,
    secret: str | None = None,
    tolerance: int | None = None,
    now: float | None = None,
) -> VerifiedEvent:
    cfg = _stripe_cfg()
    secret = (secret if secret is not None else cfg.get("WEBHOOK_SECRET") or "").strip()
    tolerance = int(tolerance if tolerance is not None else cfg.get("WEBHOOK_TOLERANCE") or 300)

    if not secret:
        raise SignatureVerificationError("Webhook secret is not configured")
    if not sig_header:
        raise SignatureVerificationError("Missing Stripe-Signature header")

    if isinstance(payload, str):
        payload = payload.encode("utf-8")

    timestamp, signatures = _parse_signature_header(sig_header)
    expected = compute_signature(payload=payload or b"", timestamp=timestamp, secret=secret)

    if not any(hmac.compare_digest(expected, sig) for sig in signatures):
        raise SignatureVerificationError("No signature matches the payload")

    current = time.time() if now is None else now
    if tolerance > 0 and abs(current - timestamp) > tolerance:
        raise SignatureVerificationError("Signature timestamp outside tolerance")

    try:
        body = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        raise SignatureVerificationError("Signed payload is not valid JSON")

    if not isinstance(body, dict) or not body.get("type"):
        raise SignatureVerificationError("Signed payload is not an event")

    return VerifiedEvent(
        _token=_CONSTRUCT_TOKEN,
        id=str(body.get("id") or ""),
        type=str(body["type"]),
        data=body.get("data") if isinstance(body.get("data"), dict) else {},
    )
