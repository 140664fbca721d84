from .errors import PaymentError, PaymentProviderError, SignatureVerificationError
from .reconciliation import apply_payment_event
from .stripe import VerifiedEvent, construct_event, create_payment_intent

__all__ = [
    "PaymentError",
    "PaymentProviderError",
    "SignatureVerificationError",
    "VerifiedEvent",
    "apply_payment_event",
    "construct_event",
    "create_payment_intent",
]
