# Order eligibility, quotes and placement

from .routes import router as orders_router
from .models import (
    CartLine, EligibilityRequest, QuoteRequest, CreateOrderRequest,
    UpdateOrderStatusRequest, CreateOrderResponse
)

__all__ = [
    "orders_router",
    "CartLine",
    "EligibilityRequest",
    "QuoteRequest",
    "CreateOrderRequest",
    "UpdateOrderStatusRequest",
    "CreateOrderResponse"
]
