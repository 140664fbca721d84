# payments/services/errors.py


class PaymentError(Exception):
    code = "payment_error"
    http_status = 400


class PaymentProviderError(PaymentError):
    """Processor unreachable or rejected the call. Safe to retry."""

    code = "payment_provider_error"
    http_status = 502


class SignatureVerificationError(PaymentError):
    code = "invalid_signature"
    http_status = 400
