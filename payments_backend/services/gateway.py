import logging
from typing import Optional
import httpx
from payments_backend.core.config import Settings
from payments_backend.core.exceptions import GatewayError

logger = logging.getLogger(__name__)


class RazorpayGateway:
    """
    Thin async client for the Razorpay orders API.
    One instance (and one connection pool) per process.
    """

    def __init__(self, key_id: str, key_secret: str,
                 base_url: str = "https://api.razorpay.com/v1",
                 timeout: float = 10.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.client = httpx.AsyncClient(
            base_url=base_url,
            auth=(key_id, key_secret),
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "RazorpayGateway":
        return cls(
            key_id=settings.RAZORPAY_KEY_ID,
            key_secret=settings.RAZORPAY_KEY_SECRET,
            base_url=settings.RAZORPAY_API_BASE_URL,
            timeout=settings.GATEWAY_TIMEOUT,
        )

    async def create_order(self, amount: int, currency: str, receipt: str) -> dict:
        """
        amount is in the smallest currency unit (paise for INR).
        Any failure, including timeouts, is raised as GatewayError.
        """
        try:
            response = await self.client.post("/orders", json={
                "amount": amount,
                "currency": currency,
                "receipt": receipt,
            })
        except httpx.TimeoutException:
            raise GatewayError("Payment gateway timed out")
        except httpx.HTTPError as e:
            raise GatewayError(str(e) or "Payment gateway unreachable")

        if response.is_success:
            try:
                order = response.json()
            except ValueError:
                order = None
            if not isinstance(order, dict):
                raise GatewayError("Invalid response from payment gateway")
            return order

        raise GatewayError(self._error_message(response))

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        # {"error": {"code": "BAD_REQUEST_ERROR", "description": "..."}}
        try:
            error = response.json().get("error") or {}
            description = error.get("description")
        except (ValueError, AttributeError):
            description = None
        return description or f"Payment gateway returned {response.status_code}"

    async def aclose(self):
        await self.client.aclose()
