# Normalization of loosely-shaped rows at the data-ingestion boundary
# Everything past these functions works with plain, strictly-typed dicts

import math
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence
from zoneinfo import ZoneInfo

from .time_utils import to_minutes

_FALSY_STRINGS = ('0', 'false', 'no', 'n', 'off', 'inactive', '')


def normalize_code(value: Any) -> str:
    """Station / restaurant codes: trimmed uppercase string."""
    if value is None:
        return ''
    return str(value).strip().upper()


def is_active_value(value: Any) -> bool:
    """
    Collapse boolean / number / string activity flags into one bool.

    Absent values default to active.
    """
    if value is None:
        return True
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() not in _FALSY_STRINGS
    return True


def _first_present(row: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in row and row[key] is not None:
            return row[key]
    return None


def _lower_keys(row: Dict[str, Any]) -> Dict[str, Any]:
    return {str(k).lower(): v for k, v in row.items()}


def to_paise(amount: Any) -> Optional[int]:
    """Rupee amount (number or numeric string) to integer paise; None if invalid."""
    if amount is None or isinstance(amount, bool):
        return None
    try:
        if isinstance(amount, str):
            # currency symbols and separators are dropped, the sign is kept
            text = amount.strip()
            sign = '-' if text.lstrip('₹Rs. ').startswith('-') else ''
            cleaned = ''.join(ch for ch in text if ch.isdigit() or ch == '.')
            if not cleaned:
                return None
            amount = float(sign + cleaned)
        value = float(amount)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return int(round(value * 100))


def normalize_min_order(paise: Any) -> Optional[int]:
    """Minimum order in paise; zero, negative or non-finite means no minimum."""
    if paise is None or isinstance(paise, bool):
        return None
    try:
        value = float(paise)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return int(value)


def normalize_cutoff(minutes: Any) -> Optional[int]:
    """Cut-off minutes before arrival; None when unset or unparseable."""
    if minutes is None or isinstance(minutes, bool):
        return None
    try:
        value = int(float(minutes))
    except (TypeError, ValueError):
        return None
    return value if value >= 0 else None


def normalize_time(value: Any) -> Optional[str]:
    """Keep a time string only if it parses as HH:MM."""
    if value is None:
        return None
    text = str(value).strip()
    return text if to_minutes(text) is not None else None


def normalize_restaurant(row: Dict[str, Any], source: str = 'db') -> Dict[str, Any]:
    """
    Map a restaurant row from any known field-name variant to the internal shape.

    Handles the table columns as well as the admin API variants
    (RestroCode / id / code, OpenTime / 0penTime / open_time, ...).
    """
    r = _lower_keys(row)
    min_order = _first_present(r, 'min_order_paise')
    if min_order is None:
        min_order = to_paise(_first_present(r, 'minimumordermvalue', 'minorder', 'minimum_order', 'min_order'))

    return {
        'restro_code': normalize_code(_first_present(r, 'restro_code', 'restrocode', 'id', 'code')),
        'restro_name': _first_present(r, 'restro_name', 'restroname', 'name') or '',
        'station_code': normalize_code(_first_present(r, 'station_code', 'stationcode', 'station')),
        'station_name': _first_present(r, 'station_name', 'stationname') or '',
        'is_active': is_active_value(_first_present(r, 'is_active', 'isactive', 'active')),
        'open_time': normalize_time(_first_present(r, 'open_time', 'opentime', '0pentime')),
        'close_time': normalize_time(_first_present(r, 'close_time', 'closedtime', 'closetime', 'closed_time')),
        'min_order_paise': normalize_min_order(min_order),
        'weekly_off': _first_present(r, 'weekly_off', 'weeklyoff') or None,
        'cutoff_minutes': normalize_cutoff(_first_present(r, 'cutoff_minutes', 'cutofftime', 'cutoff')),
        'rating': _first_present(r, 'rating', 'restrorating'),
        'display_photo': _first_present(r, 'display_photo', 'restrodisplayphoto'),
        'source': source,
    }


def normalize_menu_item(row: Dict[str, Any]) -> Dict[str, Any]:
    """Menu item row with status uppercased and prices kept in paise."""
    r = _lower_keys(row)
    status = _first_present(r, 'status', 'menu_status')
    if isinstance(status, (int, float)) and not isinstance(status, bool):
        status = 'ON' if status else 'OFF'
    return {
        'item_id': _first_present(r, 'item_id', 'id'),
        'item_code': _first_present(r, 'item_code'),
        'restro_code': normalize_code(_first_present(r, 'restro_code')),
        'item_name': _first_present(r, 'item_name', 'name') or '',
        'item_description': _first_present(r, 'item_description', 'description'),
        'item_category': _first_present(r, 'item_category', 'category'),
        'cuisine': _first_present(r, 'cuisine', 'item_cuisine'),
        'menu_type': _first_present(r, 'menu_type'),
        'start_time': _first_present(r, 'start_time'),
        'end_time': _first_present(r, 'end_time'),
        'base_price_paise': _first_present(r, 'base_price_paise') or 0,
        'gst_percent': _first_present(r, 'gst_percent') or 0,
        'selling_price_paise': _first_present(r, 'selling_price_paise', 'base_price_paise') or 0,
        'status': str(status or 'OFF').upper(),
    }


def parse_timestamp(value: Any, tz: ZoneInfo) -> Optional[datetime]:
    """
    Absolute timestamp to a naive local datetime in the service timezone.

    Offset-aware values are converted; naive values are taken as local.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip().replace('Z', '+00:00')
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(tz).replace(tzinfo=None)
    return parsed


def extract_rows(payload: Any, keys: Sequence[str] = ('rows', 'data', 'list')) -> List[Dict[str, Any]]:
    """Dict rows from an admin API payload: a bare list or the first non-empty list under keys."""
    rows: Any = []
    if isinstance(payload, list):
        rows = payload
    elif isinstance(payload, dict):
        for key in keys:
            if isinstance(payload.get(key), list) and payload[key]:
                rows = payload[key]
                break
    return [row for row in rows if isinstance(row, dict)]


def normalize_holiday_rows(payload: Any) -> List[Dict[str, Any]]:
    """Holiday rows from an admin API payload ({rows|data|list: [...]} or a bare list)."""
    return extract_rows(payload)


def active_holiday_windows(rows: Iterable[Dict[str, Any]], tz: ZoneInfo) -> List[Dict[str, datetime]]:
    """Parsed (start, end) windows, skipping soft-deleted and malformed rows."""
    windows = []
    for row in rows:
        if row.get('deleted_at'):
            continue
        start = parse_timestamp(row.get('start_at'), tz)
        end = parse_timestamp(row.get('end_at'), tz)
        if start is None or end is None:
            continue
        windows.append({'start_at': start, 'end_at': end})
    return windows
