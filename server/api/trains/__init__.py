# Train route lookup and journey search

from .routes import router as trains_router
from .models import TrainInfo, RouteStopInfo, TrainSummary, StationRestaurants

__all__ = [
    "trains_router",
    "TrainInfo",
    "RouteStopInfo",
    "TrainSummary",
    "StationRestaurants"
]
