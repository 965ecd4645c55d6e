# Shared fixtures: seeded in-memory database, fixed clock, API client

import pytest
import os
import sys
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo
from fastapi.testclient import TestClient

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

os.environ['CONFIG_ENV'] = 'development'

from api.main import app
from api.dependencies import get_clock, get_database
from api.holidays import HolidayService
from db.manager import DatabaseManager
from db.schema import create_tables
from db.route_operations import RouteOperations
from db.availability_operations import AvailabilityOperations
from db.eligibility_operations import EligibilityOperations
from db.core_operations import CoreOperations
from db.draft_operations import DraftOperations

IST = ZoneInfo('Asia/Kolkata')

# 2025-03-10 is a Monday
JOURNEY_DATE = '2025-03-10'
NOW = datetime(2025, 3, 10, 10, 0)

ORDERING = {
    'timezone': 'Asia/Kolkata',
    'gst_percent': 5,
    'platform_charge': 20,
    'default_cutoff_minutes': 90,
    'payment_modes': ['COD', 'ONLINE'],
    'menu_type_order': [
        'Thalis', 'Combos', 'Breakfast', 'Rice And Biryani', 'Roti Paratha',
        'Pizza and Sandwiches', 'Fast Food', 'Burger', 'Starters and Snacks',
        'Sweets', 'Beverages', 'Restro Specials',
    ],
}

LOCAL_HOLIDAYS = {'admin_base_url': None, 'request_timeout_seconds': 8, 'chunk_size': 6}

ROUTES = [
    # train 12345 runs daily and crosses midnight between NGP and BZA
    (12345, 'Test Superfast Express', 'NDLS', 'New Delhi', 1, None, '06:00', 'DAILY', 1, '16', 0),
    (12345, 'Test Superfast Express', 'AGC', 'Agra Cantt', 2, '09:00', '09:05', 'DAILY', 1, '2', 195),
    (12345, 'Test Superfast Express', 'BPL', 'Bhopal Jn', 3, '14:30', '14:40', 'DAILY', 1, '1', 701),
    (12345, 'Test Superfast Express', 'NGP', 'Nagpur', 4, '23:30', '23:35', 'DAILY', 1, '3', 1090),
    (12345, 'Test Superfast Express', 'BZA', 'Vijayawada Jn', 5, '00:15', '00:25', 'DAILY', 2, '6', 1767),
    (12345, 'Test Superfast Express', 'MAS', 'Chennai Central', 6, '08:00', None, 'DAILY', 3, '5', 2180),
    (22222, 'Weekend Special', 'NDLS', 'New Delhi', 1, None, '10:00', 'SAT,SUN', 1, '4', 0),
    (22222, 'Weekend Special', 'AGC', 'Agra Cantt', 2, '13:00', '13:05', 'SAT,SUN', 1, '1', 195),
    (33333, 'Mystery Mail', 'NDLS', 'New Delhi', 1, None, '07:00', 'ALTERNATE', 1, '9', 0),
    (33333, 'Mystery Mail', 'GWL', 'Gwalior', 2, '12:00', '12:05', 'ALTERNATE', 1, '2', 313),
]

STATIONS = [
    # code, name, state, district
    ('NDLS', 'New Delhi', 'Delhi', 'New Delhi'),
    ('AGC', 'Agra Cantt', 'Uttar Pradesh', 'Agra'),
    ('BPL', 'Bhopal Jn', 'Madhya Pradesh', 'Bhopal'),
    ('NGP', 'Nagpur', 'Maharashtra', 'Nagpur'),
    ('BZA', 'Vijayawada Jn', 'Andhra Pradesh', 'Krishna'),
    ('MAS', 'Chennai Central', 'Tamil Nadu', 'Chennai'),
    ('GWL', 'Gwalior', 'Madhya Pradesh', 'Gwalior'),
    ('HBJ', 'Rani Kamlapati', 'Madhya Pradesh', 'Bhopal'),
]

RESTAURANTS = [
    # code, name, station, station name, active, open, close, min order paise, weekly off, cutoff
    ('R100', 'Bhopal Rasoi', 'BPL', 'Bhopal Jn', '1', '10:00', '22:00', 20000, None, None),
    ('R101', 'Closed Canteen', 'BPL', 'Bhopal Jn', '0', '10:00', '22:00', None, None, None),
    ('R102', 'Monday Off Dhaba', 'BPL', 'Bhopal Jn', 'true', '08:00', '23:00', None, 'MON', None),
    ('R103', 'Holiday Kitchen', 'BPL', 'Bhopal Jn', 'yes', '00:00', '23:59', None, None, None),
    ('R104', 'Early Cutoff Cafe', 'BPL', 'Bhopal Jn', '1', '08:00', '22:00', None, None, 300),
    ('R200', 'Nagpur Orange Cafe', 'NGP', 'Nagpur', '1', '10:00', '22:00', None, None, None),
    ('R300', 'Midnight Biryani House', 'BZA', 'Vijayawada Jn', '1', None, None, None, None, None),
]

MENU = [
    # id, restro, name, category, menu_type, start, end, price paise, status
    (1, 'R100', 'Veg Thali', 'Veg', 'Thalis', '11:00', '23:00', 25000, 'ON'),
    (2, 'R100', 'Dal Khichdi', 'Veg', 'Rice And Biryani', '11:00', '23:00', 15000, 'ON'),
    (3, 'R100', 'Poha', 'Veg', 'Breakfast', '06:00', '10:30', 5000, 'ON'),
    (4, 'R100', 'Chicken Curry Combo', 'Non-Veg', 'Combos', '12:00', '22:00', 30000, 'ON'),
    (5, 'R100', 'Retired Special', 'Veg', 'Thalis', '11:00', '23:00', 10000, 'OFF'),
    (6, 'R100', 'Masala Chai', 'Veg', 'Beverages', '00:00', '23:59', 2000, 'ON'),
    (7, 'R100', 'Chef Surprise', 'Jain', '', '11:00', '23:00', 18000, 'ON'),
    (8, 'R100', 'Broken Window Item', 'Veg', 'Thalis', 'xx', '23:00', 9000, 'ON'),
    (9, 'R100', 'Paneer Thali', 'Veg', 'Thalis', '11:00', '23:00', 22000, 'ON'),
    (20, 'R300', 'Midnight Biryani', 'Non-Veg', 'Rice And Biryani', '22:00', '02:00', 20000, 'ON'),
    (21, 'R300', 'Idli Vada', 'Veg', 'Breakfast', '06:00', '11:00', 6000, 'ON'),
    (30, 'R200', 'Orange Barfi', 'Veg', 'Sweets', '10:00', '22:00', 15000, 'ON'),
    (40, 'R104', 'Samosa', 'Veg', 'Starters and Snacks', '10:00', '20:00', 3000, 'ON'),
    (50, 'R103', 'Holiday Thali', 'Veg', 'Thalis', '00:00', '23:59', 20000, 'ON'),
]

HOLIDAYS = [
    # R103 is closed around the BPL arrival; R100's window was soft-deleted
    ('R103', '2025-03-10 12:00:00', '2025-03-10 18:00:00', 'Staff holiday', None),
    ('R100', '2025-03-10 00:00:00', '2025-03-11 00:00:00', 'Cancelled closure', '2025-03-01 09:00:00'),
]


def seed_database(db: DatabaseManager):
    """Schema plus the fixed timetable, restaurants, menus and holidays used by the tests."""
    create_tables(db)
    with db.transaction() as conn:
        conn.executemany("""
            INSERT INTO train_routes (
                train_number, train_name, station_code, station_name, stop_sequence,
                arrival_time, departure_time, running_days, day_offset, platform, distance_km
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, ROUTES)
        conn.executemany("""
            INSERT INTO stations (station_code, station_name, state, district)
            VALUES (?, ?, ?, ?)
        """, STATIONS)
        conn.executemany("""
            INSERT INTO restaurants (
                restro_code, restro_name, station_code, station_name, is_active,
                open_time, close_time, min_order_paise, weekly_off, cutoff_minutes
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, RESTAURANTS)
        conn.executemany("""
            INSERT INTO menu_items (
                item_id, restro_code, item_name, item_category, menu_type,
                start_time, end_time, base_price_paise, gst_percent, selling_price_paise, status
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, 5, ?, ?)
        """, [(i, r, n, c, t, s, e, p, p, st) for (i, r, n, c, t, s, e, p, st) in MENU])
        conn.executemany("""
            INSERT INTO restro_holidays (restro_code, start_at, end_at, reason, deleted_at)
            VALUES (?, ?, ?, ?, ?)
        """, HOLIDAYS)


@pytest.fixture
def test_db():
    """Seeded in-memory database"""
    db = DatabaseManager(":memory:", auto_connect=True)
    seed_database(db)
    yield db
    db.close()


@pytest.fixture
def fixed_clock():
    return lambda: NOW


@pytest.fixture
def holiday_service(test_db):
    return HolidayService(test_db, LOCAL_HOLIDAYS, IST)


@pytest.fixture
def route_ops(test_db):
    return RouteOperations(test_db)


@pytest.fixture
def availability_ops(test_db, holiday_service):
    return AvailabilityOperations(test_db, holiday_service)


@pytest.fixture
def eligibility_ops(test_db, holiday_service, fixed_clock):
    return EligibilityOperations(test_db, ORDERING, holiday_service, fixed_clock)


@pytest.fixture
def core_ops(test_db):
    return CoreOperations(test_db)


@pytest.fixture
def draft_ops(test_db):
    return DraftOperations(test_db)


@pytest.fixture
def client(test_db, fixed_clock):
    """API client bound to the seeded database and the fixed clock"""
    def override_database():
        yield test_db

    app.dependency_overrides[get_database] = override_database
    app.dependency_overrides[get_clock] = lambda: fixed_clock
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def eligibility_request():
    """Scenario A request: BPL at 14:30, booked at 10:00 the same day"""
    return {
        'train': '12345',
        'station_code': 'BPL',
        'date': JOURNEY_DATE,
        'restro_code': 'R100',
        'items': [{'item_id': 1, 'qty': 1}],
    }


@pytest.fixture
def ordering_config():
    return dict(ORDERING)
