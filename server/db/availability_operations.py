# Restaurant availability and menu time filtering
# Restaurants: active -> hours -> weekly off -> holidays; menus: ON items in their serving window

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

import httpx

from .manager import DatabaseManager
from utils.normalizers import extract_rows, normalize_code, normalize_menu_item, normalize_restaurant
from utils.time_utils import (
    combine, format_hhmm, in_same_day_window, in_window, matches_weekly_off, to_minutes
)

VEG_LIKE_CATEGORIES = ('VEG', 'JAIN')
OTHERS_GROUP = 'Others'


def is_veg_like(item: Dict[str, Any]) -> bool:
    return str(item.get('item_category') or '').strip().upper() in VEG_LIKE_CATEGORIES


def restaurant_open_at(restro: Dict[str, Any], arrival_time: Optional[str]) -> bool:
    """
    Operating-hours check for a normalized restaurant.

    Hours are only enforced when both open and close parse; the window
    never wraps midnight.
    """
    open_m = to_minutes(restro.get('open_time'))
    close_m = to_minutes(restro.get('close_time'))
    if open_m is None or close_m is None:
        return True
    return in_same_day_window(to_minutes(arrival_time), open_m, close_m)


def filter_menu_by_time(
    items: Sequence[Dict[str, Any]],
    arrival_time: str,
    secondary: str = 'price',
    veg_only: bool = False,
    menu_type_order: Sequence[str] = ()
) -> List[Dict[str, Any]]:
    """
    Items orderable at the arrival time, in display order.

    Args:
        items: normalized menu items
        arrival_time: 'HH:MM'
        secondary: 'price' or 'name', the order inside a menu type
        veg_only: keep only Veg / Jain items
        menu_type_order: menu type display ranking; unknown types follow
            in encounter order

    Returns:
        filtered and sorted items (empty for an invalid arrival time)
    """
    arrival = to_minutes(arrival_time)
    if arrival is None:
        return []

    visible = []
    for item in items:
        if item.get('status') != 'ON':
            continue
        if veg_only and not is_veg_like(item):
            continue
        if not in_window(arrival, to_minutes(item.get('start_time')), to_minutes(item.get('end_time'))):
            continue
        visible.append(item)

    ranks = {name.lower(): i for i, name in enumerate(menu_type_order)}
    encounter: Dict[str, int] = {}
    for item in visible:
        key = (item.get('menu_type') or '').lower()
        if key not in ranks and key not in encounter:
            encounter[key] = len(encounter)

    def sort_key(item):
        key = (item.get('menu_type') or '').lower()
        group = ranks[key] if key in ranks else len(ranks) + encounter[key]
        if secondary == 'name':
            return (group, str(item.get('item_name') or '').lower())
        return (group, int(item.get('selling_price_paise') or 0), str(item.get('item_name') or '').lower())

    return sorted(visible, key=sort_key)


def group_menu_by_type(items: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Consecutive menu types as [{menu_type, items}]; a blank type is 'Others'."""
    groups: List[Dict[str, Any]] = []
    index: Dict[str, Dict[str, Any]] = {}
    for item in items:
        name = (item.get('menu_type') or '').strip() or OTHERS_GROUP
        if name not in index:
            index[name] = {'menu_type': name, 'items': []}
            groups.append(index[name])
        index[name]['items'].append(item)
    return groups


class AvailabilityOperations:
    """
    Restaurant and menu availability at a station stop.
    """
    def __init__(self, db_manager: DatabaseManager, holiday_service=None):
        """
        Args:
            db_manager: database manager
            holiday_service: HolidayService; without one no holiday filtering happens
        """
        self.db = db_manager
        self.holidays = holiday_service
        self.logger = logging.getLogger(self.__class__.__name__)

    def restaurants_at_station(self, station_code: str) -> List[Dict[str, Any]]:
        """All restaurants registered at a station, normalized, active or not."""
        rows = self.db.fetch_all("""
            SELECT * FROM restaurants
            WHERE UPPER(TRIM(station_code)) = ?
            ORDER BY restro_name ASC, restro_code ASC
        """, [normalize_code(station_code)])
        return [normalize_restaurant(r) for r in rows]

    @property
    def admin(self):
        """Admin API client shared with the holiday service, or None."""
        return getattr(self.holidays, 'admin', None)

    async def _admin_restaurants(self, station_code: str) -> List[Dict[str, Any]]:
        """Restaurants of one station from the admin API; [] when the lookup fails."""
        admin = self.admin
        try:
            payload = await asyncio.wait_for(admin.get_json(f"/api/stations/{station_code}"), timeout=admin.timeout)
        except asyncio.TimeoutError:
            self.logger.warning(f"Admin restaurant lookup timed out for {station_code}")
            return []
        except (httpx.HTTPError, ValueError) as e:
            self.logger.warning(f"Admin restaurant lookup failed for {station_code}: {type(e).__name__}: {e}")
            return []

        restaurants = []
        for row in extract_rows(payload, keys=('restaurants', 'data', 'rows')):
            restro = normalize_restaurant(row, source='admin')
            if not restro['restro_code']:
                continue
            if not restro['station_code']:
                restro['station_code'] = station_code
            restaurants.append(restro)
        return sorted(restaurants, key=lambda r: (str(r['restro_name']), r['restro_code']))

    async def restaurants_for_stations(self, station_codes: Iterable[str]) -> Dict[str, List[Dict[str, Any]]]:
        """
        Registered restaurants per station.

        Stations with no local rows are looked up on the admin API when one is
        configured, in the same bounded chunks as holiday lookups.

        Returns:
            {station_code: normalized restaurants}, codes normalized
        """
        codes = list(dict.fromkeys(normalize_code(c) for c in station_codes if normalize_code(c)))
        result = {code: self.restaurants_at_station(code) for code in codes}

        missing = [code for code in codes if not result[code]]
        admin = self.admin
        if missing and admin is not None and admin.configured:
            fetched = await admin.map_chunked(missing, self._admin_restaurants)
            result.update(zip(missing, fetched))
        return result

    def get_restaurant(self, restro_code: str) -> Optional[Dict[str, Any]]:
        row = self.db.fetch_one(
            "SELECT * FROM restaurants WHERE UPPER(TRIM(restro_code)) = ?",
            [normalize_code(restro_code)]
        )
        return normalize_restaurant(row) if row else None

    def menu_items(self, restro_code: str) -> List[Dict[str, Any]]:
        """Every menu row of a restaurant (any status), normalized."""
        rows = self.db.fetch_all("""
            SELECT * FROM menu_items
            WHERE UPPER(TRIM(restro_code)) = ?
            ORDER BY item_id ASC
        """, [normalize_code(restro_code)])
        return [normalize_menu_item(r) for r in rows]

    def menu_items_by_id(self, restro_code: str, item_ids: Sequence[Any]) -> Dict[int, Dict[str, Any]]:
        """Requested items that belong to the restaurant, keyed by item id."""
        wanted = set()
        for item_id in item_ids:
            try:
                wanted.add(int(item_id))
            except (TypeError, ValueError):
                continue
        return {
            int(item['item_id']): item
            for item in self.menu_items(restro_code)
            if item['item_id'] is not None and int(item['item_id']) in wanted
        }

    async def available_restaurants(
        self,
        station_code: str,
        arrival_date: str,
        arrival_time: str,
        restaurants: Optional[List[Dict[str, Any]]] = None
    ) -> List[Dict[str, Any]]:
        """
        Restaurants at a station that can serve a train arriving at the given time.

        Args:
            station_code: station code
            arrival_date: projected arrival date (YYYY-MM-DD)
            arrival_time: arrival time ('HH:MM')
            restaurants: preloaded station restaurants; read locally when None

        Returns:
            surviving restaurants with min_order_paise and cutoff_minutes resolved
        """
        if restaurants is None:
            restaurants = self.restaurants_at_station(station_code)

        candidates = []
        for restro in restaurants:
            if not restro['is_active']:
                continue
            if not restaurant_open_at(restro, arrival_time):
                continue
            if matches_weekly_off(restro['weekly_off'], arrival_date):
                continue
            candidates.append(restro)

        arrival_dt = combine(arrival_date, arrival_time)
        if not candidates or self.holidays is None or arrival_dt is None:
            return candidates

        blocked = await self.holidays.blocked_map([r['restro_code'] for r in candidates], arrival_dt)
        available = [r for r in candidates if not blocked.get(r['restro_code'], False)]

        if len(available) != len(candidates):
            self.logger.info(
                f"{len(candidates) - len(available)} restaurant(s) at {normalize_code(station_code)} "
                f"closed for holiday on {arrival_date} {format_hhmm(arrival_time)}"
            )
        return available

    def visible_menu(
        self,
        restro_code: str,
        arrival_time: str,
        secondary: str = 'price',
        veg_only: bool = False,
        menu_type_order: Sequence[str] = ()
    ) -> List[Dict[str, Any]]:
        """Orderable items of one restaurant at the arrival time."""
        return filter_menu_by_time(
            self.menu_items(restro_code),
            arrival_time,
            secondary=secondary,
            veg_only=veg_only,
            menu_type_order=menu_type_order,
        )
