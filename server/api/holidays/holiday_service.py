# Restaurant holiday lookups
# Local restro_holidays table by default, admin API over httpx when configured

import asyncio
import sqlite3
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
from zoneinfo import ZoneInfo

import httpx

from db.manager import DatabaseManager
from utils.admin_client import AdminClient
from utils.normalizers import active_holiday_windows, normalize_code, normalize_holiday_rows

logger = logging.getLogger(__name__)


class HolidayService:
    """Holiday-window checks for restaurants at a given local instant."""

    def __init__(
        self,
        db_manager: Optional[DatabaseManager],
        holiday_config: Dict[str, Any],
        tz: ZoneInfo,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Args:
            db_manager: database used in local mode
            holiday_config: Config.get_holiday_config() output
            tz: service timezone
            transport: optional httpx transport (tests)
        """
        self.db = db_manager
        self.tz = tz
        self.admin = AdminClient(holiday_config, transport)
        self.timeout = self.admin.timeout
        self.remote_mode = self.admin.configured

        if not self.remote_mode:
            logger.debug("Admin holiday API not configured, using local holiday table")

    def _local_rows(self, restro_code: str) -> List[Dict[str, Any]]:
        if self.db is None:
            return []
        return self.db.fetch_all("""
            SELECT restro_code, start_at, end_at, reason, deleted_at
            FROM restro_holidays
            WHERE UPPER(TRIM(restro_code)) = ? AND deleted_at IS NULL
            ORDER BY start_at ASC
        """, [restro_code])

    async def _remote_rows(self, restro_code: str) -> List[Dict[str, Any]]:
        payload = await self.admin.get_json(f"/api/restros/{restro_code}/holidays")
        return normalize_holiday_rows(payload)

    async def fetch_windows(self, restro_code: str) -> List[Dict[str, datetime]]:
        """
        Active (non-deleted, parseable) holiday windows of one restaurant.

        Raises:
            httpx.HTTPError / sqlite3.Error: lookup failures, handled by is_blocked
        """
        code = normalize_code(restro_code)
        if self.remote_mode:
            rows = await self._remote_rows(code)
        else:
            rows = self._local_rows(code)
        return active_holiday_windows(rows, self.tz)

    async def is_blocked(self, restro_code: str, at: datetime) -> bool:
        """
        Whether a holiday window contains the instant.

        Args:
            restro_code: restaurant code
            at: naive local datetime

        Returns:
            True when blocked; failed or timed-out lookups count as not blocked
        """
        try:
            windows = await asyncio.wait_for(self.fetch_windows(restro_code), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Holiday lookup timed out for {restro_code}, treating as open")
            return False
        except (httpx.HTTPError, ValueError, sqlite3.Error) as e:
            logger.warning(f"Holiday lookup failed for {restro_code}: {type(e).__name__}: {e}, treating as open")
            return False

        return any(w['start_at'] <= at <= w['end_at'] for w in windows)

    async def blocked_map(self, restro_codes: Iterable[str], at: datetime) -> Dict[str, bool]:
        """
        Holiday status for many restaurants.

        Remote lookups run in bounded parallel chunks; local lookups are
        plain queries on the request's connection and run one after another.

        Returns:
            {restro_code: blocked}, in input order
        """
        codes = list(restro_codes)
        flags = await self.admin.map_chunked(codes, lambda code: self.is_blocked(code, at))
        return dict(zip(codes, flags))
