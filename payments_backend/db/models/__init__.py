from .payment_event import PaymentEvent as PaymentEvent

__all__ = ["PaymentEvent"]
