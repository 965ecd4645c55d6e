# Station directory and the restaurants available at a station

import sqlite3
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Path, Query

from .models import StationInfo, restaurant_info
from api.dependencies import get_database, get_holiday_service
from api.holidays import HolidayService
from db.manager import DatabaseManager
from db.availability_operations import AvailabilityOperations
from db.station_operations import DEFAULT_LIMIT, StationOperations
from utils import error_codes
from utils.normalizers import normalize_code
from utils.response import create_success_response, error_json_response
from utils.time_utils import format_hhmm
from utils.validators import validate_date, validate_hhmm, validate_station_code

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/stations", tags=["stations"])


@router.get("")
async def search_stations(
    q: Optional[str] = Query(None, description="Station code prefix or name fragment"),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=50),
    db: DatabaseManager = Depends(get_database)
):
    """Stations matching a code or name fragment; without q, the first stations by name."""
    try:
        stations = StationOperations(db).search_stations(q, limit)
    except sqlite3.Error as e:
        logger.error(f"Station search failed for {q!r}: {str(e)}")
        return error_json_response(error_codes.DB_ERROR)

    return create_success_response(data=[StationInfo(**s).model_dump() for s in stations])


@router.get("/{station_code}")
async def get_station(
    station_code: str = Path(..., description="Station code"),
    db: DatabaseManager = Depends(get_database),
    holidays: HolidayService = Depends(get_holiday_service)
):
    """
    Station details with its active restaurants, regardless of time.

    Restaurants come from the local table, or from the admin API when the
    station has none locally and the admin API is configured.
    """
    if not validate_station_code(station_code):
        return error_json_response(error_codes.MISSING_PARAMS, meta={'missing': ['station_code']})

    code = normalize_code(station_code)
    try:
        station = StationOperations(db).get_station(code)
        by_station = await AvailabilityOperations(db, holidays).restaurants_for_stations([code])
    except sqlite3.Error as e:
        logger.error(f"Station lookup failed for {code}: {str(e)}")
        return error_json_response(error_codes.DB_ERROR)

    restaurants = [r for r in by_station.get(code, []) if r['is_active']]
    if station is None and not restaurants:
        return error_json_response(error_codes.STATION_NOT_FOUND, meta={'station_code': code})
    if station is None:
        station = {'station_code': code, 'station_name': restaurants[0]['station_name'] or code}

    return create_success_response(
        data={
            'station': StationInfo(**station).model_dump(),
            'restaurants': [restaurant_info(r) for r in restaurants],
        }
    )


@router.get("/{station_code}/restaurants")
async def list_station_restaurants(
    station_code: str = Path(..., description="Station code"),
    date: Optional[str] = Query(None, description="Arrival date YYYY-MM-DD"),
    time: Optional[str] = Query(None, description="Arrival time HH:MM"),
    db: DatabaseManager = Depends(get_database),
    holidays: HolidayService = Depends(get_holiday_service)
):
    """
    Restaurants at a station that are active, open at the arrival time,
    not on weekly off and not on holiday.
    """
    missing = [name for name, value in (('date', date), ('time', time)) if not value]
    if missing or not validate_station_code(station_code):
        return error_json_response(error_codes.MISSING_PARAMS, meta={'missing': missing or ['station_code']})
    if not validate_date(date):
        return error_json_response(error_codes.INVALID_DATE, meta={'date': date})
    if not validate_hhmm(time):
        return error_json_response(error_codes.INVALID_ARRIVAL_TIME, meta={'time': time})

    code = normalize_code(station_code)
    try:
        availability = AvailabilityOperations(db, holidays)
        by_station = await availability.restaurants_for_stations([code])
        restaurants = await availability.available_restaurants(code, date, time, restaurants=by_station.get(code, []))
    except sqlite3.Error as e:
        logger.error(f"Restaurant listing failed for {code}: {str(e)}")
        return error_json_response(error_codes.DB_ERROR)

    return create_success_response(
        data={
            'station_code': code,
            'arrival_date': date,
            'arrival_time': format_hhmm(time),
            'restaurants': [restaurant_info(r) for r in restaurants],
        },
        message=f"{len(restaurants)} restaurant(s) available"
    )
