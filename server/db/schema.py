# Table definitions
# Amounts are stored as integer paise; times as 'HH:MM[:SS]' text

from .manager import DatabaseManager

TABLES_SQL = [
    # one row per (train, station) on the itinerary
    """
    CREATE TABLE IF NOT EXISTS train_routes (
        route_id INTEGER PRIMARY KEY,
        train_number INTEGER NOT NULL,
        train_name VARCHAR(100),
        station_code VARCHAR(10) NOT NULL,
        station_name VARCHAR(100),
        stop_sequence INTEGER NOT NULL,
        arrival_time VARCHAR(8),
        departure_time VARCHAR(8),
        halt_time VARCHAR(8),
        running_days VARCHAR(40),
        day_offset INTEGER DEFAULT 1,
        platform VARCHAR(10),
        distance_km INTEGER,
        UNIQUE(train_number, stop_sequence)
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_train_routes_station
        ON train_routes(station_code)
    """,
    """
    CREATE TABLE IF NOT EXISTS stations (
        station_code VARCHAR(10) PRIMARY KEY,
        station_name VARCHAR(100) NOT NULL,
        state VARCHAR(60),
        district VARCHAR(60),
        image_url VARCHAR(500)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS restaurants (
        restro_code VARCHAR(20) PRIMARY KEY,
        restro_name VARCHAR(150) NOT NULL,
        station_code VARCHAR(10) NOT NULL,
        station_name VARCHAR(100),
        is_active TEXT DEFAULT '1',            -- bool / number / string, normalized on read
        open_time VARCHAR(8),
        close_time VARCHAR(8),
        min_order_paise INTEGER,
        weekly_off VARCHAR(40),
        cutoff_minutes INTEGER,
        rating REAL,
        display_photo VARCHAR(500)
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_restaurants_station
        ON restaurants(station_code)
    """,
    """
    CREATE TABLE IF NOT EXISTS restro_holidays (
        holiday_id INTEGER PRIMARY KEY,
        restro_code VARCHAR(20) NOT NULL,
        start_at TIMESTAMP NOT NULL,
        end_at TIMESTAMP NOT NULL,
        reason VARCHAR(200),
        deleted_at TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS menu_items (
        item_id INTEGER PRIMARY KEY,
        item_code VARCHAR(30),
        restro_code VARCHAR(20) NOT NULL,
        item_name VARCHAR(150) NOT NULL,
        item_description TEXT,
        item_category VARCHAR(20),             -- Veg / Jain / Non-Veg
        cuisine VARCHAR(50),
        menu_type VARCHAR(50),
        start_time VARCHAR(8),
        end_time VARCHAR(8),
        base_price_paise INTEGER NOT NULL,
        gst_percent REAL DEFAULT 0,
        selling_price_paise INTEGER NOT NULL,
        status VARCHAR(10) DEFAULT 'ON'        -- ON / OFF / DELETED
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_menu_items_restro
        ON menu_items(restro_code, status)
    """,
    """
    CREATE TABLE IF NOT EXISTS orders (
        order_id INTEGER PRIMARY KEY,
        order_number VARCHAR(20) UNIQUE NOT NULL,
        order_status VARCHAR(20) DEFAULT 'PLACED',
        train_number VARCHAR(10),
        train_name VARCHAR(100),
        pnr VARCHAR(10),
        coach VARCHAR(10),
        seat VARCHAR(10),
        restro_code VARCHAR(20) NOT NULL,
        restro_name VARCHAR(150),
        station_code VARCHAR(10) NOT NULL,
        station_name VARCHAR(100),
        arrival_date DATE NOT NULL,
        arrival_time VARCHAR(8) NOT NULL,
        customer_name VARCHAR(100),
        customer_mobile VARCHAR(15) NOT NULL,
        subtotal_paise INTEGER NOT NULL,
        gst_paise INTEGER NOT NULL,
        platform_charge_paise INTEGER NOT NULL,
        total_paise INTEGER NOT NULL,
        payment_mode VARCHAR(10) NOT NULL,
        payment_status VARCHAR(20) DEFAULT 'PENDING',
        journey_payload TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS order_items (
        order_item_id INTEGER PRIMARY KEY,
        order_number VARCHAR(20) NOT NULL,
        item_id INTEGER,
        item_code VARCHAR(30),
        item_name VARCHAR(150),
        item_category VARCHAR(20),
        menu_type VARCHAR(50),
        base_price_paise INTEGER,
        gst_percent REAL,
        selling_price_paise INTEGER NOT NULL,
        quantity INTEGER NOT NULL,
        line_total_paise INTEGER NOT NULL
    )
    """,
    # append-only audit trail, best-effort
    """
    CREATE TABLE IF NOT EXISTS order_status_history (
        history_id INTEGER PRIMARY KEY,
        order_number VARCHAR(20) NOT NULL,
        old_status VARCHAR(20),
        new_status VARCHAR(20) NOT NULL,
        note VARCHAR(200),
        changed_by VARCHAR(50),
        changed_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS order_drafts (
        draft_id VARCHAR(40) PRIMARY KEY,
        payload TEXT NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
]


def create_tables(db: DatabaseManager):
    """Create every table and index if missing."""
    for sql in TABLES_SQL:
        db.execute_single(sql)
    db.logger.debug(f"Schema ensured ({len(TABLES_SQL)} statements)")
