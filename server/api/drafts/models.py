# Order draft models

from typing import List, Optional
from pydantic import BaseModel, Field


class DraftCartLine(BaseModel):
    """Cart line kept in a draft"""
    item_id: int
    qty: int
    item_name: Optional[str] = None
    unit_price: Optional[float] = None


class DraftJourney(BaseModel):
    """Journey and passenger details collected during checkout"""
    train: Optional[str] = None
    date: Optional[str] = None
    boarding: Optional[str] = None
    arrival_time: Optional[str] = None
    pnr: Optional[str] = None
    coach: Optional[str] = None
    seat: Optional[str] = None
    customer_name: Optional[str] = None
    customer_mobile: Optional[str] = None


class DraftOutlet(BaseModel):
    """Restaurant the cart belongs to"""
    restro_code: str
    restro_name: Optional[str] = None
    station_code: str
    station_name: Optional[str] = None


class OrderDraft(BaseModel):
    """Checkout session: created at search, cleared when the order is placed"""
    journey: DraftJourney = Field(default_factory=DraftJourney)
    outlet: Optional[DraftOutlet] = None
    cart: List[DraftCartLine] = Field(default_factory=list)
