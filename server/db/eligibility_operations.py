# Order eligibility resolver
# Ordered checks over route, schedule, restaurant and cart; the first failure wins

import sqlite3
import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional
from zoneinfo import ZoneInfo

from .manager import DatabaseManager
from .outcomes import success_outcome, failure_outcome
from .route_operations import RouteOperations, stop_time
from .availability_operations import AvailabilityOperations, restaurant_open_at
from utils import error_codes
from utils.normalizers import normalize_code
from utils.pricing import cart_lines, paise_to_rupees, quote, rupees_to_paise
from utils.time_utils import (
    combine, format_hhmm, has_recognizable_days, in_window, matches_running_day,
    matches_weekly_off, project_arrival_date, to_minutes
)
from utils.validators import validate_date

Clock = Callable[[], datetime]


def local_clock(tz: ZoneInfo) -> Clock:
    """Clock returning the current naive local time in the service timezone."""
    def now() -> datetime:
        return datetime.now(tz).replace(tzinfo=None)
    return now


class EligibilityOperations:
    """
    Decides whether an order can be placed for a train stop and cart.

    Check order: input, train, station on route, running day, restaurant,
    weekly off, holiday, cut-off, restaurant hours, items, minimum order.
    """
    def __init__(
        self,
        db_manager: DatabaseManager,
        ordering: Dict[str, Any],
        holiday_service=None,
        clock: Optional[Clock] = None
    ):
        """
        Args:
            db_manager: database manager
            ordering: Config.get_ordering_config() output
            holiday_service: HolidayService, None disables holiday checks
            clock: callable returning naive local now
        """
        self.db = db_manager
        self.ordering = ordering
        self.routes = RouteOperations(db_manager)
        self.availability = AvailabilityOperations(db_manager, holiday_service)
        self.holidays = holiday_service
        self.clock = clock or local_clock(ZoneInfo(ordering.get('timezone', 'Asia/Kolkata')))
        self.logger = logging.getLogger(self.__class__.__name__)

    @staticmethod
    def _missing(request: Dict[str, Any]) -> List[str]:
        return [
            field for field in ('train', 'station_code', 'date', 'restro_code')
            if not str(request.get(field) or '').strip()
        ]

    async def resolve(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """
        Resolve an eligibility request.

        Args:
            request: {train, station_code, date, restro_code, items: [{item_id, qty}],
                      boarding (optional)}

        Returns:
            outcome {success, code, meta, data}; data carries the stop,
            arrival date/time, restaurant and pricing quote on success
        """
        try:
            return await self._resolve(request)
        except sqlite3.Error as e:
            self.logger.error(f"Eligibility check failed on database access: {e}", exc_info=True)
            return failure_outcome(error_codes.DB_ERROR)

    async def _resolve(self, request: Dict[str, Any]) -> Dict[str, Any]:
        missing = self._missing(request)
        if missing:
            return failure_outcome(error_codes.MISSING_PARAMS, {'missing': missing})

        journey_date = str(request['date']).strip()
        if not validate_date(journey_date):
            return failure_outcome(error_codes.INVALID_DATE, {'date': journey_date})

        lines = cart_lines(request.get('items') or [])
        if not lines:
            return failure_outcome(error_codes.EMPTY_CART)

        located = self.routes.locate_train(str(request['train']))
        if not located['success']:
            return located
        train = located['data']['train']
        stops = located['data']['stops']

        station_code = normalize_code(request['station_code'])
        stop = self.routes.find_stop(stops, station_code)
        if stop is None:
            return failure_outcome(error_codes.STATION_NOT_ON_ROUTE, {
                'train': train['train_number'],
                'station_code': station_code,
            })

        running_days = stop['running_days']
        if not matches_running_day(running_days, journey_date) and has_recognizable_days(running_days):
            return failure_outcome(error_codes.NOT_RUNNING_ON_DATE, {
                'train': train['train_number'],
                'date': journey_date,
                'running_days': running_days,
            })

        arrival_time = stop_time(stop)
        if arrival_time is None:
            return failure_outcome(error_codes.INVALID_ARRIVAL_TIME, {'station_code': station_code})

        boarding = self.routes.find_stop(stops, request.get('boarding') or '')
        arrival_date = project_arrival_date(
            journey_date,
            boarding['day_offset'] if boarding else None,
            stop['day_offset']
        )
        arrival_dt = combine(arrival_date, arrival_time)

        restro_code = normalize_code(request['restro_code'])
        restro = self.availability.get_restaurant(restro_code)
        if restro is None or not restro['is_active'] or restro['station_code'] != station_code:
            return failure_outcome(error_codes.RESTRO_NOT_FOUND, {
                'restro_code': restro_code,
                'station_code': station_code,
            })

        if matches_weekly_off(restro['weekly_off'], arrival_date):
            return failure_outcome(error_codes.WEEKLY_OFF, {
                'arrival_date': arrival_date,
                'weekly_off': restro['weekly_off'],
            })

        if self.holidays is not None and await self.holidays.is_blocked(restro_code, arrival_dt):
            return failure_outcome(error_codes.HOLIDAY_CLOSED, {
                'arrival_date': arrival_date,
                'arrival': arrival_time,
            })

        cutoff = self._cutoff_check(restro, arrival_dt)
        if cutoff is not None:
            return cutoff

        if not restaurant_open_at(restro, arrival_time):
            return failure_outcome(error_codes.RESTRO_TIME_MISMATCH, {
                'arrival': arrival_time,
                'open_time': format_hhmm(restro['open_time']),
                'close_time': format_hhmm(restro['close_time']),
            })

        menu = self.availability.menu_items_by_id(restro_code, [line.get('item_id') for line in lines])
        priced, item_failure = self._price_lines(lines, menu, arrival_time)
        if item_failure is not None:
            return item_failure

        pricing = quote(
            priced,
            self.ordering.get('gst_percent', 5),
            rupees_to_paise(self.ordering.get('platform_charge', 0))
        )

        min_order = restro['min_order_paise']
        if min_order is not None and pricing['subtotal_paise'] < min_order:
            return failure_outcome(error_codes.MIN_ORDER_NOT_MET, {
                'min_order': paise_to_rupees(min_order),
                'subtotal': pricing['subtotal'],
            })

        return success_outcome({
            'train': train,
            'stop': {
                'station_code': stop['station_code'],
                'station_name': stop['station_name'],
                'stop_sequence': stop['stop_sequence'],
                'arrival_time': stop['arrival_time'],
                'departure_time': stop['departure_time'],
                'halt_time': stop['halt_time'],
                'day_offset': stop['day_offset'],
            },
            'arrival_date': arrival_date,
            'arrival_time': arrival_time,
            'restaurant': {
                'restro_code': restro['restro_code'],
                'restro_name': restro['restro_name'],
                'station_code': restro['station_code'],
                'open_time': restro['open_time'],
                'close_time': restro['close_time'],
                'min_order': paise_to_rupees(min_order) if min_order is not None else None,
                'cutoff_minutes': self._cutoff_minutes(restro)[0],
            },
            'lines': priced,
            'pricing': pricing,
        })

    def quote_cart(self, restro_code: str, items: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Bill for a cart at one restaurant, priced from the stored menu.

        Returns:
            outcome with data {restro_code, lines, pricing}, or
            empty_cart / restro_not_found / item_unavailable / db_error
        """
        lines = cart_lines(items)
        if not lines:
            return failure_outcome(error_codes.EMPTY_CART)

        try:
            code = normalize_code(restro_code)
            restro = self.availability.get_restaurant(code)
            if restro is None or not restro['is_active']:
                return failure_outcome(error_codes.RESTRO_NOT_FOUND, {'restro_code': code})

            menu = self.availability.menu_items_by_id(code, [line.get('item_id') for line in lines])
        except sqlite3.Error as e:
            self.logger.error(f"Quote failed on database access: {e}", exc_info=True)
            return failure_outcome(error_codes.DB_ERROR)

        priced, item_failure = self._price_lines(lines, menu)
        if item_failure is not None:
            return item_failure

        pricing = quote(
            priced,
            self.ordering.get('gst_percent', 5),
            rupees_to_paise(self.ordering.get('platform_charge', 0))
        )
        min_order = restro['min_order_paise']
        return success_outcome({'restro_code': code, 'lines': priced, 'pricing': pricing}, {
            'min_order': paise_to_rupees(min_order) if min_order is not None else None,
            'min_order_met': min_order is None or pricing['subtotal_paise'] >= min_order,
        })

    def _cutoff_minutes(self, restro: Dict[str, Any]):
        """(minutes, rejection code) for a restaurant's booking cut-off."""
        if restro.get('cutoff_minutes') is not None:
            return int(restro['cutoff_minutes']), error_codes.RESTRO_CUTOFF
        return int(self.ordering.get('default_cutoff_minutes', 90)), error_codes.CUTOFF_EXCEEDED

    def _cutoff_check(self, restro: Dict[str, Any], arrival_dt: Optional[datetime]) -> Optional[Dict[str, Any]]:
        minutes, code = self._cutoff_minutes(restro)
        if arrival_dt is None:
            return failure_outcome(code, {'cutoff_minutes': minutes})

        deadline = arrival_dt - timedelta(minutes=minutes)
        now = self.clock()
        if now > deadline:
            return failure_outcome(code, {
                'cutoff_minutes': minutes,
                'deadline': deadline.isoformat(timespec='minutes'),
                'now': now.isoformat(timespec='minutes'),
            })
        return None

    def _price_lines(self, lines, menu, arrival_time=None):
        """
        Server-priced cart lines, or the item failure outcome.

        Without an arrival time only availability is checked.
        """
        unavailable = []
        outside_window = []
        priced = []
        arrival = to_minutes(arrival_time)

        for line in lines:
            try:
                item = menu.get(int(line.get('item_id')))
            except (TypeError, ValueError):
                item = None
            if item is None or item['status'] != 'ON':
                unavailable.append({'item_id': line.get('item_id')})
                continue

            if arrival_time is not None and not in_window(
                    arrival, to_minutes(item['start_time']), to_minutes(item['end_time'])):
                outside_window.append({
                    'item_id': item['item_id'],
                    'item_name': item['item_name'],
                    'start_time': item['start_time'],
                    'end_time': item['end_time'],
                })
                continue

            unit = int(item['selling_price_paise'])
            priced.append({
                'item_id': item['item_id'],
                'item_code': item['item_code'],
                'item_name': item['item_name'],
                'item_category': item['item_category'],
                'menu_type': item['menu_type'],
                'base_price_paise': int(item['base_price_paise']),
                'gst_percent': item['gst_percent'],
                'qty': line['qty'],
                'unit_price_paise': unit,
                'line_total_paise': unit * line['qty'],
            })

        if unavailable:
            return [], failure_outcome(error_codes.ITEM_UNAVAILABLE, {'items': unavailable})
        if outside_window:
            return [], failure_outcome(error_codes.ITEM_TIME_MISMATCH, {'items': outside_window})
        return priced, None
