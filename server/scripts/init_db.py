#!/usr/bin/env python3
# Database initialization: schema plus an optional sample timetable, restaurants and menus

import os
import sys
import sqlite3
import argparse
import logging
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from db.manager import DatabaseManager, CORE_TABLES
from db.schema import create_tables
from utils.config import Config

# (train_number, train_name, station_code, station_name, seq, arrival, departure, running_days, day_offset, platform, km)
SAMPLE_ROUTES = [
    (12626, 'Kerala Express', 'NDLS', 'New Delhi', 1, None, '20:10', 'DAILY', 1, '8', 0),
    (12626, 'Kerala Express', 'AGC', 'Agra Cantt', 2, '23:05', '23:10', 'DAILY', 1, '2', 195),
    (12626, 'Kerala Express', 'BPL', 'Bhopal Jn', 3, '06:35', '06:45', 'DAILY', 2, '1', 701),
    (12626, 'Kerala Express', 'NGP', 'Nagpur', 4, '13:35', '13:40', 'DAILY', 2, '3', 1090),
    (12626, 'Kerala Express', 'BZA', 'Vijayawada Jn', 5, '02:05', '02:20', 'DAILY', 3, '6', 1767),
    (12626, 'Kerala Express', 'TVC', 'Thiruvananthapuram Central', 6, '13:15', None, 'DAILY', 4, '1', 3033),
    (12002, 'Bhopal Shatabdi', 'NDLS', 'New Delhi', 1, None, '06:00', 'MON,TUE,WED,THU,SAT,SUN', 1, '1', 0),
    (12002, 'Bhopal Shatabdi', 'AGC', 'Agra Cantt', 2, '07:50', '07:55', 'MON,TUE,WED,THU,SAT,SUN', 1, '1', 195),
    (12002, 'Bhopal Shatabdi', 'GWL', 'Gwalior', 3, '09:23', '09:28', 'MON,TUE,WED,THU,SAT,SUN', 1, '1', 313),
    (12002, 'Bhopal Shatabdi', 'BPL', 'Bhopal Jn', 4, '14:25', None, 'MON,TUE,WED,THU,SAT,SUN', 1, '1', 701),
]

# (station_code, station_name, state, district)
SAMPLE_STATIONS = [
    ('NDLS', 'New Delhi', 'Delhi', 'New Delhi'),
    ('AGC', 'Agra Cantt', 'Uttar Pradesh', 'Agra'),
    ('GWL', 'Gwalior', 'Madhya Pradesh', 'Gwalior'),
    ('BPL', 'Bhopal Jn', 'Madhya Pradesh', 'Bhopal'),
    ('NGP', 'Nagpur', 'Maharashtra', 'Nagpur'),
    ('BZA', 'Vijayawada Jn', 'Andhra Pradesh', 'Krishna'),
    ('TVC', 'Thiruvananthapuram Central', 'Kerala', 'Thiruvananthapuram'),
]

# (restro_code, name, station_code, station_name, is_active, open, close, min_order_paise, weekly_off, cutoff, rating)
SAMPLE_RESTAURANTS = [
    ('R1001', 'Agra Dhaba', 'AGC', 'Agra Cantt', '1', '07:00', '23:30', 15000, None, None, 4.2),
    ('R1002', 'Petha House Kitchen', 'AGC', 'Agra Cantt', 'true', '09:00', '21:00', 0, 'TUE', 60, 3.9),
    ('R2001', 'Bhopal Biryani Point', 'BPL', 'Bhopal Jn', '1', '06:00', '23:00', 20000, None, 120, 4.5),
    ('R3001', 'Nagpur Orange Cafe', 'NGP', 'Nagpur', 'yes', '10:00', '22:00', 10000, 'SUN', None, 4.0),
    ('R4001', 'Andhra Meals Junction', 'BZA', 'Vijayawada Jn', '1', None, None, None, None, None, 4.4),
]

# (item_code, restro_code, name, category, cuisine, menu_type, start, end, base_paise, gst, selling_paise, status)
SAMPLE_MENU = [
    ('AGD-01', 'R1001', 'Veg Thali', 'Veg', 'North Indian', 'Thalis', '11:00', '23:30', 19000, 5, 19950, 'ON'),
    ('AGD-02', 'R1001', 'Aloo Paratha', 'Veg', 'North Indian', 'Roti Paratha', '07:00', '11:30', 8000, 5, 8400, 'ON'),
    ('AGD-03', 'R1001', 'Masala Chai', 'Veg', 'Beverages', 'Beverages', '00:00', '23:59', 2000, 5, 2100, 'ON'),
    ('AGD-04', 'R1001', 'Chicken Biryani', 'Non-Veg', 'Mughlai', 'Rice And Biryani', '11:00', '23:00', 22000, 5, 23100, 'ON'),
    ('BBP-01', 'R2001', 'Bhopali Chicken Biryani', 'Non-Veg', 'Mughlai', 'Rice And Biryani', '11:00', '23:00', 24000, 5, 25200, 'ON'),
    ('BBP-02', 'R2001', 'Poha Jalebi', 'Veg', 'Central Indian', 'Breakfast', '06:00', '11:00', 7000, 5, 7350, 'ON'),
    ('BBP-03', 'R2001', 'Jain Thali', 'Jain', 'North Indian', 'Thalis', '11:00', '22:00', 18000, 5, 18900, 'ON'),
    ('NOC-01', 'R3001', 'Saoji Chicken Combo', 'Non-Veg', 'Saoji', 'Combos', '12:00', '22:00', 26000, 5, 27300, 'ON'),
    ('NOC-02', 'R3001', 'Orange Barfi (250g)', 'Veg', 'Sweets', 'Sweets', '10:00', '22:00', 15000, 5, 15750, 'OFF'),
    ('AMJ-01', 'R4001', 'Andhra Meals', 'Veg', 'South Indian', 'Thalis', '11:00', '15:30', 16000, 5, 16800, 'ON'),
    ('AMJ-02', 'R4001', 'Midnight Idli Vada', 'Veg', 'South Indian', 'Breakfast', '22:00', '04:00', 6000, 5, 6300, 'ON'),
]


def insert_sample_data(db_manager: DatabaseManager):
    """Insert the sample data set; rows that already exist are left alone."""
    with db_manager.transaction() as conn:
        conn.executemany("""
            INSERT OR IGNORE INTO train_routes (
                train_number, train_name, station_code, station_name, stop_sequence,
                arrival_time, departure_time, running_days, day_offset, platform, distance_km
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, SAMPLE_ROUTES)

        conn.executemany("""
            INSERT OR IGNORE INTO stations (station_code, station_name, state, district)
            VALUES (?, ?, ?, ?)
        """, SAMPLE_STATIONS)

        conn.executemany("""
            INSERT OR IGNORE INTO restaurants (
                restro_code, restro_name, station_code, station_name, is_active,
                open_time, close_time, min_order_paise, weekly_off, cutoff_minutes, rating
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, SAMPLE_RESTAURANTS)

        existing = conn.execute("SELECT COUNT(*) FROM menu_items").fetchone()[0]
        if existing == 0:
            conn.executemany("""
                INSERT INTO menu_items (
                    item_code, restro_code, item_name, item_category, cuisine, menu_type,
                    start_time, end_time, base_price_paise, gst_percent, selling_price_paise, status
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, SAMPLE_MENU)
        else:
            logging.info(f"menu_items already has {existing} rows, sample menu skipped")


def main():
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    parser = argparse.ArgumentParser(description="Create the database schema")
    parser.add_argument('--db', help="database path (defaults to the configured path)")
    parser.add_argument('--sample-data', action='store_true', help="load the sample timetable and menus")
    args = parser.parse_args()

    config_env = os.getenv('CONFIG_ENV', 'development')
    db_path = args.db or Config().get_database_config()['path']

    logging.info(f"Initializing database: {db_path}")
    logging.info(f"Environment: {config_env}")

    try:
        with DatabaseManager(db_path) as db_manager:
            create_tables(db_manager)

            if args.sample_data:
                logging.info("Loading sample data...")
                insert_sample_data(db_manager)

            db_manager.check_integrity()

            logging.info("Database initialized")
            for table_name in CORE_TABLES:
                count = db_manager.execute_single(f"SELECT COUNT(*) FROM {table_name}").fetchone()[0]
                logging.info(f"  - {table_name}: {count} row(s)")

    except (ConnectionError, RuntimeError, OSError, sqlite3.Error) as e:
        logging.error(f"Database initialization failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
