import json
import logging
from dataclasses import dataclass
from typing import Optional
from pydantic import ValidationError
from payments_backend.core.exceptions import (
    AuthenticationMissingError,
    InvalidSignatureError,
    MalformedPayloadError,
)
from payments_backend.core.signature import verify_signature
from payments_backend.schemas.webhook import MAX_COLUMN_LENGTH, PaymentFields, RazorpayEvent
from payments_backend.services.payment_store import PaymentStore

logger = logging.getLogger(__name__)


@dataclass
class RecordResult:
    event_id: str
    inserted: bool


def extract_payment_fields(event: RazorpayEvent, default_currency: str = "INR") -> PaymentFields:
    """
    Pull the payment entity out of the event. Missing or empty values fall back:
    status -> event type -> "unknown", amount -> 0, currency -> default,
    email / contact -> None.
    """
    entity = event.payment_entity
    if entity is None:
        return PaymentFields(
            status=event.event or "unknown",
            amount=0,
            currency=default_currency,
        )
    return PaymentFields(
        status=entity.status or event.event or "unknown",
        amount=entity.amount or 0,
        currency=entity.currency or default_currency,
        email=entity.email or None,
        contact=entity.contact or None,
    )


class WebhookRecorder:
    def __init__(self, store: PaymentStore, secret: str, default_currency: str = "INR"):
        self.store = store
        self.secret = secret
        self.default_currency = default_currency

    async def record(self, payload: bytes, signature: Optional[str],
                     event_id_header: Optional[str] = None) -> RecordResult:
        """
        Authenticate a webhook delivery and store it at most once.

        1. secret and signature must both be present
        2. HMAC is checked over the raw payload bytes
        3. only then the payload is parsed
        4. the payment row is inserted, a duplicate event_id is a no-op

        Nothing is written unless every step before the insert succeeds.
        """
        if not self.secret or not signature or not signature.strip():
            logger.warning("Webhook rejected: missing signature or secret")
            raise AuthenticationMissingError()

        if not verify_signature(payload, signature, self.secret):
            logger.warning("Webhook rejected: invalid signature")
            raise InvalidSignatureError()

        event = self.parse_event(payload)
        event_id = event.id or (event_id_header or "").strip()
        if not event_id:
            logger.warning("Webhook rejected: missing event id")
            raise MalformedPayloadError("Missing event id")
        if len(event_id) > MAX_COLUMN_LENGTH:
            logger.warning("Webhook rejected: event id too long")
            raise MalformedPayloadError("Event id too long")

        fields = extract_payment_fields(event, self.default_currency)
        inserted = await self.store.insert_if_absent(event_id, fields)
        if inserted:
            logger.info(f"Payment event stored: {event_id} ({fields.status})")
        else:
            logger.info(f"Webhook {event_id} already processed, skipping")
        return RecordResult(event_id=event_id, inserted=inserted)

    @staticmethod
    def parse_event(payload: bytes) -> RazorpayEvent:
        try:
            data = json.loads(payload)
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("Webhook rejected: body is not valid JSON")
            raise MalformedPayloadError("Invalid JSON")
        if not isinstance(data, dict):
            raise MalformedPayloadError("Event must be a JSON object")
        try:
            return RazorpayEvent.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Webhook rejected: unexpected event shape: {e.error_count()} errors")
            raise MalformedPayloadError("Unexpected event shape")
