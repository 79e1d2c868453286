import json
from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from payments_backend.api.deps import get_order_service
from payments_backend.schemas.order import CreateOrderRequest, CreateOrderResponse
from payments_backend.services.orders import OrderService

router = APIRouter()


async def read_order_request(request: Request) -> CreateOrderRequest:
    # a body that is not a JSON object is treated like a missing amount
    try:
        data = json.loads(await request.body() or b"{}")
        return CreateOrderRequest.model_validate(data)
    except (ValueError, ValidationError):
        return CreateOrderRequest()


@router.post("/create-order", response_model=CreateOrderResponse)
async def create_order(
        data: CreateOrderRequest = Depends(read_order_request),
        order_service: OrderService = Depends(get_order_service)):
    order = await order_service.create_order(data.amount, data.currency)
    return CreateOrderResponse(order=order)
