# Route Locator
# Train id -> ordered stop list, exact number match first then fuzzy name match

import logging
from typing import Any, Dict, List, Optional

from .manager import DatabaseManager
from .outcomes import success_outcome, failure_outcome
from utils import error_codes
from utils.normalizers import normalize_code
from utils.time_utils import (
    format_hhmm, halt_time, has_recognizable_days, matches_running_day,
    project_arrival_date, to_minutes
)
from utils.validators import is_train_number

_ROUTE_COLUMNS = """
    train_number, train_name, station_code, station_name, stop_sequence,
    arrival_time, departure_time, halt_time, running_days, day_offset,
    platform, distance_km
"""


def _escape_like(text: str) -> str:
    return text.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def stop_time(stop: Dict[str, Any]) -> Optional[str]:
    """
    Delivery time at a stop: arrival, or departure at the origin station.

    Returns:
        'HH:MM', or None when neither time parses
    """
    for key in ('arrival_time', 'departure_time'):
        value = stop.get(key)
        if to_minutes(value) is not None:
            return format_hhmm(value)
    return None


class RouteOperations:
    """
    Route lookups over the static timetable (train_routes).
    """
    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager
        self.logger = logging.getLogger(self.__class__.__name__)

    def _to_stop(self, row: Dict[str, Any]) -> Dict[str, Any]:
        day = row.get('day_offset')
        return {
            'train_number': row['train_number'],
            'train_name': row.get('train_name') or '',
            'station_code': normalize_code(row['station_code']),
            'station_name': row.get('station_name') or normalize_code(row['station_code']),
            'stop_sequence': row['stop_sequence'],
            'arrival_time': row.get('arrival_time'),
            'departure_time': row.get('departure_time'),
            'halt_time': halt_time(row.get('arrival_time'), row.get('departure_time'), row.get('halt_time')),
            'running_days': row.get('running_days'),
            'day_offset': int(day) if day is not None else None,
            'platform': row.get('platform'),
            'distance_km': row.get('distance_km'),
        }

    def query_route_exact(self, train_number: int) -> List[Dict[str, Any]]:
        """All stops of one train number, ordered by stop sequence."""
        rows = self.db.fetch_all(f"""
            SELECT {_ROUTE_COLUMNS}
            FROM train_routes
            WHERE train_number = ?
            ORDER BY stop_sequence ASC
        """, [int(train_number)])
        return [self._to_stop(r) for r in rows]

    def query_route_partial(self, text: str) -> List[Dict[str, Any]]:
        """
        Case-insensitive partial match on train name or the textual train number.

        When several trains match, the stops of the lowest train number are
        returned so the result is always a single itinerary.
        """
        pattern = f"%{_escape_like(text.strip().lower())}%"
        rows = self.db.fetch_all(f"""
            SELECT {_ROUTE_COLUMNS}
            FROM train_routes
            WHERE LOWER(train_name) LIKE ? ESCAPE '\\'
               OR CAST(train_number AS TEXT) LIKE ? ESCAPE '\\'
            ORDER BY train_number ASC, stop_sequence ASC
        """, [pattern, pattern])

        if not rows:
            return []

        first_train = rows[0]['train_number']
        return [self._to_stop(r) for r in rows if r['train_number'] == first_train]

    def search_trains(self, text: str, limit: int = 20) -> List[Dict[str, Any]]:
        """Distinct trains matching a number or name fragment (autocomplete)."""
        pattern = f"%{_escape_like(text.strip().lower())}%"
        return self.db.fetch_all("""
            SELECT train_number, MAX(train_name) AS train_name, COUNT(*) AS stop_count
            FROM train_routes
            WHERE LOWER(train_name) LIKE ? ESCAPE '\\'
               OR CAST(train_number AS TEXT) LIKE ? ESCAPE '\\'
            GROUP BY train_number
            ORDER BY train_number ASC
            LIMIT ?
        """, [pattern, pattern, limit])

    def locate_train(self, train_id: str, target_date: Optional[str] = None) -> Dict[str, Any]:
        """
        Resolve a train identifier to its ordered stops.

        Args:
            train_id: train number or a name fragment
            target_date: journey date (YYYY-MM-DD); when given, stops are
                filtered by their running days

        Returns:
            outcome with data {train: {...}, stops: [...]}, or
            train_not_found / not_running_on_date
        """
        query = (train_id or '').strip()
        if not query:
            return failure_outcome(error_codes.MISSING_PARAMS, {'missing': ['train']})

        stops: List[Dict[str, Any]] = []
        if is_train_number(query):
            stops = self.query_route_exact(int(query))

        if not stops:
            stops = self.query_route_partial(query)

        if not stops:
            self.logger.info(f"Train not found: {query}")
            return failure_outcome(error_codes.TRAIN_NOT_FOUND, {'train': query})

        train = {
            'train_number': stops[0]['train_number'],
            'train_name': stops[0]['train_name'],
        }

        if target_date:
            running = [s for s in stops if matches_running_day(s['running_days'], target_date)]
            if not running:
                # a definite mismatch blocks; an unreadable schedule string does not
                if any(has_recognizable_days(s['running_days']) for s in stops):
                    return failure_outcome(error_codes.NOT_RUNNING_ON_DATE, {
                        'train': train['train_number'],
                        'date': target_date,
                        'running_days': stops[0]['running_days'],
                    })
                self.logger.warning(
                    f"Unrecognised running days for train {train['train_number']}: "
                    f"{stops[0]['running_days']!r}, keeping full route"
                )
                running = stops
            stops = running

        return success_outcome({'train': train, 'stops': stops})

    @staticmethod
    def find_stop(stops: List[Dict[str, Any]], station_code: str) -> Optional[Dict[str, Any]]:
        code = normalize_code(station_code)
        for stop in stops:
            if stop['station_code'] == code:
                return stop
        return None

    def route_from_boarding(self, stops: List[Dict[str, Any]], boarding_code: Optional[str],
                            journey_date: str) -> List[Dict[str, Any]]:
        """
        Stops from the boarding station to the end of the route, each with
        its projected arrival date and delivery time.

        An unknown boarding station keeps the whole route and leaves every
        arrival date equal to the journey date.
        """
        boarding = self.find_stop(stops, boarding_code) if boarding_code else None
        start = stops.index(boarding) if boarding else 0
        boarding_offset = boarding['day_offset'] if boarding else None

        projected = []
        for stop in stops[start:]:
            projected.append({
                **stop,
                'arrival': stop_time(stop),
                'arrival_date': project_arrival_date(journey_date, boarding_offset, stop['day_offset']),
            })
        return projected
