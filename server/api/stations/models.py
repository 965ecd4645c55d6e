# Station / restaurant response models

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

from utils.pricing import paise_to_rupees


class RestaurantInfo(BaseModel):
    """Restaurant as listed at a station"""
    restro_code: str
    restro_name: str
    station_code: str
    station_name: str = ""
    open_time: Optional[str] = None
    close_time: Optional[str] = None
    weekly_off: Optional[str] = None
    min_order: Optional[float] = Field(None, description="Minimum order in rupees")
    cutoff_minutes: Optional[int] = None
    rating: Optional[float] = None
    display_photo: Optional[str] = None


def restaurant_info(restro: Dict[str, Any]) -> Dict[str, Any]:
    """Normalized restaurant row to its public shape."""
    min_order = restro.get('min_order_paise')
    return RestaurantInfo(
        restro_code=restro['restro_code'],
        restro_name=restro['restro_name'],
        station_code=restro['station_code'],
        station_name=restro.get('station_name') or '',
        open_time=restro.get('open_time'),
        close_time=restro.get('close_time'),
        weekly_off=restro.get('weekly_off'),
        min_order=paise_to_rupees(min_order) if min_order is not None else None,
        cutoff_minutes=restro.get('cutoff_minutes'),
        rating=restro.get('rating'),
        display_photo=restro.get('display_photo'),
    ).model_dump()


class StationInfo(BaseModel):
    """Station directory entry"""
    station_code: str
    station_name: str
    state: Optional[str] = None
    district: Optional[str] = None
    image_url: Optional[str] = None
