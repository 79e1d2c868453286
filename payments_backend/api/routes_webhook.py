from typing import Optional
from fastapi import APIRouter, Depends, Header, Request
from payments_backend.api.deps import get_webhook_recorder
from payments_backend.schemas.webhook import WebhookAck
from payments_backend.services.webhook import WebhookRecorder

router = APIRouter()


@router.post("/webhook", response_model=WebhookAck)
async def razorpay_webhook(
    request: Request,
    x_razorpay_signature: Optional[str] = Header(None, alias="X-Razorpay-Signature"),
    x_razorpay_event_id: Optional[str] = Header(None, alias="X-Razorpay-Event-Id"),
    recorder: WebhookRecorder = Depends(get_webhook_recorder)
):
    """
    Handle Razorpay webhook callbacks.

    The raw body is read before anything parses it, the signature is
    computed over those exact bytes. Redelivered events are acknowledged
    with the same response and do not create a second row.
    """
    payload = await request.body()
    await recorder.record(payload, x_razorpay_signature, x_razorpay_event_id)
    return WebhookAck()
