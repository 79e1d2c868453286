from fastapi import Request
from payments_backend.services.orders import OrderService
from payments_backend.services.webhook import WebhookRecorder


# services are built once in create_app() and kept on app.state

def get_order_service(request: Request) -> OrderService:
    return request.app.state.order_service


def get_webhook_recorder(request: Request) -> WebhookRecorder:
    return request.app.state.webhook_recorder