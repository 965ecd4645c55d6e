# Time-of-day arithmetic, running-day matching and arrival-date projection
# None is the "invalid" sentinel throughout; nothing here raises on bad input

import re
from datetime import date, datetime, timedelta
from typing import Optional, Union

MINUTES_PER_DAY = 24 * 60

WEEKDAY_CODES = ('MON', 'TUE', 'WED', 'THU', 'FRI', 'SAT', 'SUN')

_EVERY_DAY_TOKENS = ('DAILY', 'ALL')
_DAY_SPLIT = re.compile(r'[ ,/]+')

DateLike = Union[str, date, datetime, None]


def to_minutes(hhmm: Optional[str]) -> Optional[int]:
    """
    Convert 'HH:MM' (or 'HH:MM:SS') to minutes since midnight.

    Only the first five characters are considered.

    Args:
        hhmm: time string

    Returns:
        minutes in [0, 1439], or None when the value cannot be parsed
    """
    if hhmm is None:
        return None
    text = str(hhmm).strip()[:5]
    parts = text.split(':')
    if len(parts) != 2:
        return None
    hh, mm = parts
    if not (hh.isdigit() and mm.isdigit()):
        return None
    hours, minutes = int(hh), int(mm)
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def in_window(instant: Optional[int], start: Optional[int], end: Optional[int]) -> bool:
    """
    Window containment in minutes, with overnight wraparound.

    start <= end is a same-day window (inclusive on both ends);
    start > end spans midnight, e.g. 22:00-02:00.
    Any invalid value fails closed.
    """
    if instant is None or start is None or end is None:
        return False
    if start <= end:
        return start <= instant <= end
    return instant >= start or instant <= end


def in_same_day_window(instant: Optional[int], start: Optional[int], end: Optional[int]) -> bool:
    """Restaurant-hours containment: close < open never matches."""
    if instant is None or start is None or end is None:
        return False
    return start <= instant <= end


def time_in_window(instant: Optional[str], start: Optional[str], end: Optional[str]) -> bool:
    """String form of in_window."""
    return in_window(to_minutes(instant), to_minutes(start), to_minutes(end))


def format_hhmm(value: Optional[str]) -> str:
    """Zero-padded 'HH:MM' for display; empty string when missing."""
    if not value:
        return ''
    parts = str(value).strip()[:5].split(':')
    hh = parts[0] if parts and parts[0] else '00'
    mm = parts[1] if len(parts) > 1 and parts[1] else '00'
    return f"{hh.zfill(2)}:{mm.zfill(2)}"


def minutes_to_hhmm(minutes: Optional[int]) -> str:
    if minutes is None:
        return ''
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def time_to_seconds(value: Optional[str]) -> Optional[int]:
    """'H:MM:SS' / 'HH:MM' to seconds since midnight, None when invalid."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    parts = text.split(':')
    if len(parts) < 2 or not all(p.isdigit() for p in parts):
        return None
    hh, mm = int(parts[0]), int(parts[1])
    ss = int(parts[2]) if len(parts) > 2 else 0
    return hh * 3600 + mm * 60 + ss


def format_halt(seconds: Optional[int]) -> Optional[str]:
    """Halt duration as '5m' below an hour, 'H:MM' above."""
    if seconds is None or seconds < 0:
        return None
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    if hours > 0:
        return f"{hours}:{minutes:02d}"
    return f"{minutes}m"


def halt_time(arrival: Optional[str], departure: Optional[str], stoptime: Optional[str] = None) -> Optional[str]:
    """
    Halt at a stop: the recorded stop time when present, otherwise
    departure minus arrival (negative differences are ignored).
    """
    if stoptime:
        seconds = time_to_seconds(stoptime)
        return format_halt(seconds) if seconds is not None else str(stoptime)
    arr, dep = time_to_seconds(arrival), time_to_seconds(departure)
    if arr is None or dep is None or dep < arr:
        return None
    return format_halt(dep - arr)


def parse_date(value: DateLike) -> Optional[date]:
    """ISO 'YYYY-MM-DD' (or a date / datetime) to date; None when invalid."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def weekday_code(value: DateLike) -> Optional[str]:
    """Three-letter weekday code (MON..SUN) for a date."""
    parsed = parse_date(value)
    if parsed is None:
        return None
    return WEEKDAY_CODES[parsed.weekday()]


def day_tokens(days: Optional[str]) -> list:
    """Uppercase tokens of a weekly schedule string."""
    if not days:
        return []
    return [t for t in _DAY_SPLIT.split(str(days).upper().strip()) if t]


def is_every_day(days: Optional[str]) -> bool:
    return str(days or '').upper().strip() in _EVERY_DAY_TOKENS


def has_recognizable_days(days: Optional[str]) -> bool:
    """True when the schedule string names DAILY/ALL or at least one weekday."""
    if is_every_day(days):
        return True
    return any(token in WEEKDAY_CODES for token in day_tokens(days))


def matches_running_day(days: Optional[str], value: DateLike) -> bool:
    """
    Decide whether a route entry runs on the given date.

    Args:
        days: running-days string ("DAILY", "ALL", "MON,WED,FRI", "Mon Tue"...)
        value: calendar date

    Returns:
        True for an empty string or DAILY/ALL; otherwise True iff the date's
        weekday code is one of the tokens. An unparseable date never runs.
    """
    if not days or not str(days).strip():
        return True
    if is_every_day(days):
        return True
    code = weekday_code(value)
    if code is None:
        return False
    return code in day_tokens(days)


def matches_weekly_off(days: Optional[str], value: DateLike) -> bool:
    """True when a weekly-off string closes the outlet on the given date."""
    if not days or not str(days).strip():
        return False
    if is_every_day(days):
        return True
    code = weekday_code(value)
    if code is None:
        return False
    return code in day_tokens(days)


def add_days(value: DateLike, days: int) -> Optional[str]:
    parsed = parse_date(value)
    if parsed is None:
        return None
    return (parsed + timedelta(days=days)).isoformat()


def project_arrival_date(boarding_date: DateLike, boarding_offset: Optional[int],
                         target_offset: Optional[int]) -> Optional[str]:
    """
    Calendar date on which the train reaches a stop.

    Args:
        boarding_date: date the passenger boards (YYYY-MM-DD)
        boarding_offset: journey day of the boarding stop, None when unknown
        target_offset: journey day of the target stop

    Returns:
        ISO date; the boarding date itself when either offset is unknown
    """
    parsed = parse_date(boarding_date)
    if parsed is None:
        return None
    if boarding_offset is None or target_offset is None:
        return parsed.isoformat()
    return (parsed + timedelta(days=int(target_offset) - int(boarding_offset))).isoformat()


def combine(date_value: DateLike, hhmm: Optional[str]) -> Optional[datetime]:
    """Naive local datetime from a date and an 'HH:MM' time."""
    parsed = parse_date(date_value)
    minutes = to_minutes(hhmm)
    if parsed is None or minutes is None:
        return None
    return datetime(parsed.year, parsed.month, parsed.day, minutes // 60, minutes % 60)
