import logging
import math
import time
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional
from payments_backend.core.exceptions import GatewayError, InvalidAmountError, InvalidCurrencyError
from payments_backend.services.gateway import RazorpayGateway

logger = logging.getLogger(__name__)


def to_minor_units(amount: Any) -> int:
    """
    Convert an amount in the major unit (rupees) to the minor unit (paise),
    rounding half up. Only JSON numbers are accepted; strings and booleans
    are rejected even when they look numeric.
    """
    if amount is None or isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise InvalidAmountError()
    if isinstance(amount, float) and not math.isfinite(amount):
        raise InvalidAmountError()
    if amount <= 0:
        raise InvalidAmountError()

    try:
        minor = int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # more digits than the decimal context holds
        raise InvalidAmountError()
    if minor < 1:
        raise InvalidAmountError()
    return minor


def normalize_currency(currency: Any, default: str = "INR") -> str:
    if currency is None or currency == "":
        return default
    if not isinstance(currency, str) or len(currency) != 3 or not currency.isalpha():
        raise InvalidCurrencyError()
    return currency.upper()


def make_receipt_id() -> str:
    return f"receipt_{int(time.time() * 1000)}"


class OrderService:
    def __init__(self, gateway: RazorpayGateway, default_currency: str = "INR"):
        self.gateway = gateway
        self.default_currency = default_currency

    async def create_order(self, amount: Any, currency: Optional[Any] = None) -> dict:
        minor_amount = to_minor_units(amount)
        currency = normalize_currency(currency, self.default_currency)
        receipt = make_receipt_id()

        try:
            order = await self.gateway.create_order(minor_amount, currency, receipt)
        except GatewayError as e:
            logger.error(f"Error creating order {receipt}: {e.message}")
            raise

        logger.info(f"Created order {order.get('id')} for {receipt} ({minor_amount} {currency})")
        return order
