# Train routes: lookup, itinerary and journey search

import sqlite3
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Path, Query

from .models import RouteStopInfo, StationRestaurants, TrainInfo, TrainSummary
from api.dependencies import get_database, get_holiday_service
from api.holidays import HolidayService
from api.stations.models import restaurant_info
from db.manager import DatabaseManager
from db.route_operations import RouteOperations
from db.availability_operations import AvailabilityOperations
from utils import error_codes
from utils.normalizers import normalize_code
from utils.response import create_success_response, error_json_response, outcome_response
from utils.validators import validate_date

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/trains", tags=["trains"])


@router.get("")
async def find_trains(
    q: str = Query(..., min_length=1, description="Train number or name fragment"),
    limit: int = Query(20, ge=1, le=50),
    db: DatabaseManager = Depends(get_database)
):
    """Trains matching a number or name fragment."""
    try:
        trains = RouteOperations(db).search_trains(q, limit)
    except sqlite3.Error as e:
        logger.error(f"Train search failed for {q!r}: {str(e)}")
        return error_json_response(error_codes.DB_ERROR)

    return create_success_response(data=[TrainSummary(**t).model_dump() for t in trains])


@router.get("/search")
async def search_journey(
    train: Optional[str] = Query(None, description="Train number or name"),
    date: Optional[str] = Query(None, description="Journey date YYYY-MM-DD"),
    boarding: Optional[str] = Query(None, description="Boarding station code"),
    db: DatabaseManager = Depends(get_database),
    holidays: HolidayService = Depends(get_holiday_service)
):
    """
    Route from the boarding station with the restaurants available at each stop.

    Stops without a usable arrival time are listed with no restaurants.
    """
    missing = [name for name, value in (('train', train), ('date', date)) if not (value or '').strip()]
    if missing:
        return error_json_response(error_codes.MISSING_PARAMS, meta={'missing': missing})
    if not validate_date(date):
        return error_json_response(error_codes.INVALID_DATE, meta={'date': date})

    try:
        route_ops = RouteOperations(db)
        located = route_ops.locate_train(train, date)
        if not located['success']:
            return outcome_response(located)

        availability = AvailabilityOperations(db, holidays)
        stops = route_ops.route_from_boarding(located['data']['stops'], boarding, date)
        by_station = await availability.restaurants_for_stations(
            stop['station_code'] for stop in stops if stop['arrival'] and stop['arrival_date']
        )
        stations = []
        for stop in stops:
            restaurants = []
            if stop['arrival'] and stop['arrival_date']:
                restaurants = await availability.available_restaurants(
                    stop['station_code'], stop['arrival_date'], stop['arrival'],
                    restaurants=by_station.get(normalize_code(stop['station_code']), [])
                )
            stations.append(StationRestaurants(
                stop=RouteStopInfo(**stop),
                restaurants=[restaurant_info(r) for r in restaurants]
            ).model_dump())

    except sqlite3.Error as e:
        logger.error(f"Journey search failed for train {train!r}: {str(e)}")
        return error_json_response(error_codes.DB_ERROR)

    return create_success_response(
        data={
            'train': TrainInfo(**located['data']['train']).model_dump(),
            'date': date,
            'boarding': (boarding or '').strip().upper() or None,
            'stations': stations,
        }
    )


@router.get("/{train}/route")
async def get_train_route(
    train: str = Path(..., description="Train number or name"),
    date: Optional[str] = Query(None, description="Journey date YYYY-MM-DD"),
    boarding: Optional[str] = Query(None, description="Boarding station code"),
    db: DatabaseManager = Depends(get_database)
):
    """Ordered stops; with a date, filtered by running days and dated per stop."""
    if date and not validate_date(date):
        return error_json_response(error_codes.INVALID_DATE, meta={'date': date})

    try:
        route_ops = RouteOperations(db)
        located = route_ops.locate_train(train, date)
        if not located['success']:
            return outcome_response(located)

        stops = located['data']['stops']
        if date:
            stops = route_ops.route_from_boarding(stops, boarding, date)

    except sqlite3.Error as e:
        logger.error(f"Route lookup failed for train {train!r}: {str(e)}")
        return error_json_response(error_codes.DB_ERROR)

    return create_success_response(
        data={
            'train': TrainInfo(**located['data']['train']).model_dump(),
            'stops': [RouteStopInfo(**s).model_dump() for s in stops],
        }
    )
