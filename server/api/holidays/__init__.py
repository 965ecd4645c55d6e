# Holiday lookups used by availability and eligibility checks

from .holiday_service import HolidayService

__all__ = ["HolidayService"]
