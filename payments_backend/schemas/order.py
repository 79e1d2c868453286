from typing import Any, Optional
from pydantic import BaseModel, ConfigDict


class CreateOrderRequest(BaseModel):
    # amount is validated by OrderService so that any bad value maps to "Invalid amount"
    model_config = ConfigDict(extra="ignore")

    amount: Any = None
    currency: Optional[Any] = None


class CreateOrderResponse(BaseModel):
    success: bool = True
    order: dict
