# Station directory
# Autocomplete by code or name, and single-station lookup

import logging
from typing import Any, Dict, List, Optional

from .manager import DatabaseManager
from .route_operations import _escape_like
from utils.normalizers import normalize_code

DEFAULT_LIMIT = 10


class StationOperations:
    """
    Station lookups on the stations table.
    """
    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager
        self.logger = logging.getLogger(self.__class__.__name__)

    def search_stations(self, text: Optional[str] = None, limit: int = DEFAULT_LIMIT) -> List[Dict[str, Any]]:
        """
        Stations whose code starts with the text or whose name contains it.

        An exact code match ranks first, then code prefixes, then names.
        Without text the first stations by name are returned.
        """
        query = (text or '').strip()
        if not query:
            return self.db.fetch_all("""
                SELECT station_code, station_name, state, district, image_url
                FROM stations
                ORDER BY station_name ASC
                LIMIT ?
            """, [limit])

        code = normalize_code(query)
        escaped = _escape_like(query.lower())
        return self.db.fetch_all("""
            SELECT station_code, station_name, state, district, image_url
            FROM stations
            WHERE UPPER(station_code) LIKE ? ESCAPE '\\'
               OR LOWER(station_name) LIKE ? ESCAPE '\\'
            ORDER BY CASE
                         WHEN UPPER(station_code) = ? THEN 0
                         WHEN UPPER(station_code) LIKE ? ESCAPE '\\' THEN 1
                         ELSE 2
                     END,
                     station_name ASC
            LIMIT ?
        """, [
            f"{_escape_like(code)}%", f"%{escaped}%",
            code, f"{_escape_like(code)}%",
            limit
        ])

    def get_station(self, station_code: str) -> Optional[Dict[str, Any]]:
        return self.db.fetch_one("""
            SELECT station_code, station_name, state, district, image_url
            FROM stations
            WHERE UPPER(TRIM(station_code)) = ?
        """, [normalize_code(station_code)])
