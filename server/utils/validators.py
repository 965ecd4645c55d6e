# Input validators
# Plain boolean checks used by routes before calling the operations layer

import re
from datetime import datetime
from typing import Any, Iterable

_TRAIN_NUMBER = re.compile(r'^[0-9]+$')
_STATION_CODE = re.compile(r'^[A-Za-z0-9]{1,8}$')
_MOBILE = re.compile(r'^[6-9][0-9]{9}$')


def validate_date(date_str: str, format_str: str = "%Y-%m-%d") -> bool:
    """
    Validate a date string

    Args:
        date_str: date string
        format_str: expected format

    Returns:
        validation result
    """
    if not date_str or not isinstance(date_str, str):
        return False
    try:
        datetime.strptime(date_str, format_str)
        return True
    except ValueError:
        return False


def validate_hhmm(value: str) -> bool:
    """'HH:MM' or 'HH:MM:SS' within a day."""
    if not value or not isinstance(value, str):
        return False
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            datetime.strptime(value.strip(), fmt)
            return True
        except ValueError:
            continue
    return False


def is_train_number(value: str) -> bool:
    """All-digit train identifier (vs. a name fragment)."""
    return bool(value) and bool(_TRAIN_NUMBER.match(str(value).strip()))


def validate_station_code(code: str) -> bool:
    return bool(code) and bool(_STATION_CODE.match(str(code).strip()))


def validate_mobile(mobile: str) -> bool:
    """Indian 10-digit mobile number."""
    return bool(mobile) and bool(_MOBILE.match(str(mobile).strip()))


def validate_pnr(pnr: str) -> bool:
    """PNR numbers are 10 digits."""
    return bool(pnr) and str(pnr).strip().isdigit() and len(str(pnr).strip()) == 10


def validate_positive_integer(value: Any) -> bool:
    try:
        return int(value) > 0
    except (ValueError, TypeError):
        return False


def validate_payment_mode(mode: str, allowed: Iterable[str] = ('COD', 'ONLINE')) -> bool:
    return isinstance(mode, str) and mode.upper() in {m.upper() for m in allowed}


def validate_order_status(status: str) -> bool:
    return status in ['PLACED', 'ACCEPTED', 'DISPATCHED', 'DELIVERED', 'CANCELLED']


def validate_menu_status(status: str) -> bool:
    return status in ['ON', 'OFF', 'DELETED']
