# Station directory and restaurant listing

from .routes import router as stations_router
from .models import RestaurantInfo, StationInfo, restaurant_info

__all__ = [
    "stations_router",
    "RestaurantInfo",
    "StationInfo",
    "restaurant_info"
]
