# Train route models

from typing import List, Optional
from pydantic import BaseModel


class TrainInfo(BaseModel):
    """Train display metadata"""
    train_number: int
    train_name: str


class RouteStopInfo(BaseModel):
    """One stop on a train's route"""
    station_code: str
    station_name: str
    stop_sequence: int
    arrival_time: Optional[str] = None
    departure_time: Optional[str] = None
    halt_time: Optional[str] = None
    running_days: Optional[str] = None
    day_offset: Optional[int] = None
    platform: Optional[str] = None
    distance_km: Optional[int] = None
    arrival: Optional[str] = None
    arrival_date: Optional[str] = None


class TrainSummary(BaseModel):
    """Search hit"""
    train_number: int
    train_name: Optional[str] = None
    stop_count: int


class StationRestaurants(BaseModel):
    """A stop with the restaurants that can serve it"""
    stop: RouteStopInfo
    restaurants: List[dict]
