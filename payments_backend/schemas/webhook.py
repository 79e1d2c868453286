from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

# widest value the payments columns hold
MAX_COLUMN_LENGTH = 255
MAX_BIGINT = 2**63 - 1


class PaymentEntity(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    status: Optional[str] = Field(None, max_length=MAX_COLUMN_LENGTH)
    amount: Optional[int] = Field(None, ge=0, le=MAX_BIGINT)
    currency: Optional[str] = Field(None, max_length=MAX_COLUMN_LENGTH)
    email: Optional[str] = Field(None, max_length=MAX_COLUMN_LENGTH)
    contact: Optional[str] = Field(None, max_length=MAX_COLUMN_LENGTH)


class PaymentPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    entity: Optional[PaymentEntity] = None


class EventPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    payment: Optional[PaymentPayload] = None


class RazorpayEvent(BaseModel):
    """
    Webhook body as delivered by the gateway:
    {id, event, payload: {payment: {entity: {...}}}}
    Every field is optional, fallbacks are applied when extracting.
    """
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = Field(None, max_length=MAX_COLUMN_LENGTH)
    event: Optional[str] = Field(None, max_length=MAX_COLUMN_LENGTH)
    payload: Optional[EventPayload] = None

    @property
    def payment_entity(self) -> Optional[PaymentEntity]:
        if self.payload is None or self.payload.payment is None:
            return None
        return self.payload.payment.entity


class PaymentFields(BaseModel):
    """ column values written for one event """
    status: str
    amount: int
    currency: str
    email: Optional[str] = None
    contact: Optional[str] = None


class WebhookAck(BaseModel):
    status: str = "ok"
