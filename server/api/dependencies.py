# Shared FastAPI dependencies
# Tests replace get_database / get_clock / get_holiday_service via app.dependency_overrides

from zoneinfo import ZoneInfo

from fastapi import Depends

from utils.config import Config
from db.manager import DatabaseManager
from db.eligibility_operations import Clock, local_clock
from api.holidays import HolidayService

config = Config()


def get_config() -> Config:
    return config


def get_timezone(cfg: Config = Depends(get_config)) -> ZoneInfo:
    return ZoneInfo(cfg.get_ordering_config()['timezone'])


def get_database(cfg: Config = Depends(get_config)):
    """Per-request database connection."""
    db_config = cfg.get_database_config()
    db_manager = DatabaseManager(db_config["path"], auto_connect=True)
    try:
        yield db_manager
    finally:
        db_manager.close()


def get_clock(tz: ZoneInfo = Depends(get_timezone)) -> Clock:
    return local_clock(tz)


def get_holiday_service(
    db: DatabaseManager = Depends(get_database),
    cfg: Config = Depends(get_config),
    tz: ZoneInfo = Depends(get_timezone)
) -> HolidayService:
    return HolidayService(db, cfg.get_holiday_config(), tz)
