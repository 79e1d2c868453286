import sys
import traceback


class PaymentError(Exception):
    def __init__(self, message: str, status_code: int = 400, stack_trace: bool = False):
        self.message = message
        self.status_code = status_code
        self.stack_trace = traceback.format_exc() if stack_trace and sys.exc_info()[0] is not None else None
        super().__init__(self.message)


class InvalidAmountError(PaymentError):
    def __init__(self):
        super().__init__("Invalid amount", status_code=400)


class InvalidCurrencyError(PaymentError):
    def __init__(self):
        super().__init__("Invalid currency", status_code=400)


class AuthenticationMissingError(PaymentError):
    def __init__(self):
        super().__init__("Missing signature or secret", status_code=400)


class InvalidSignatureError(PaymentError):
    def __init__(self):
        super().__init__("Invalid signature", status_code=400)


class MalformedPayloadError(PaymentError):
    def __init__(self, message: str = "Malformed payload"):
        super().__init__(message, status_code=400)


class GatewayError(PaymentError):
    def __init__(self, message: str):
        super().__init__(message, status_code=500, stack_trace=True)


class StoreError(PaymentError):
    def __init__(self):
        super().__init__("Webhook error", status_code=500, stack_trace=True)
