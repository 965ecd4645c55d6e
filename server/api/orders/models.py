# Order request / response models

from typing import List, Optional
from pydantic import BaseModel, Field


class CartLine(BaseModel):
    """Cart line; the unit price is always taken from the menu"""
    item_id: int = Field(..., description="Menu item ID")
    qty: int = Field(..., description="Quantity, lines with qty <= 0 are dropped")
    unit_price: Optional[float] = Field(None, description="Client-side price, informational only")


class EligibilityRequest(BaseModel):
    """Order eligibility check"""
    train: str = Field(..., description="Train number or name")
    station_code: str = Field(..., description="Delivery station code")
    date: str = Field(..., description="Journey date YYYY-MM-DD")
    restro_code: str = Field(..., description="Restaurant code")
    boarding: Optional[str] = Field(None, description="Boarding station code")
    items: List[CartLine] = Field(default_factory=list, description="Cart lines")


class QuoteRequest(BaseModel):
    """Bill preview for a cart"""
    restro_code: str = Field(..., description="Restaurant code")
    items: List[CartLine] = Field(default_factory=list, description="Cart lines")


class CreateOrderRequest(EligibilityRequest):
    """Order placement"""
    customer_name: Optional[str] = Field(None, description="Passenger name")
    customer_mobile: str = Field(..., description="10-digit mobile number")
    pnr: Optional[str] = Field(None, description="10-digit PNR")
    coach: Optional[str] = Field(None, description="Coach")
    seat: Optional[str] = Field(None, description="Seat / berth")
    payment_mode: str = Field("COD", description="COD or ONLINE")
    platform_charge: Optional[float] = Field(None, description="Charge shown to the client, informational only")
    draft_id: Optional[str] = Field(None, description="Draft to clear once the order is placed")


class UpdateOrderStatusRequest(BaseModel):
    """Order status change"""
    status: str = Field(..., description="PLACED, ACCEPTED, DISPATCHED, DELIVERED or CANCELLED")
    note: Optional[str] = Field(None, description="Reason / note")


class CreateOrderResponse(BaseModel):
    """Placed order"""
    order_number: str
    order_status: str
    payment_mode: str
    payment_status: str
    arrival_date: str
    arrival_time: str
    restro_code: str
    station_code: str
    subtotal: float
    gst: float
    platform_charge: float
    total: float
