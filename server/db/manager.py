# Database connection and transaction management
# Thin wrapper over sqlite3 used by every *Operations class

import sqlite3
import logging
import os
from datetime import datetime
from typing import List, Optional, Dict, Any, Callable
from contextlib import contextmanager

CORE_TABLES = [
    'train_routes',
    'stations',
    'restaurants',
    'restro_holidays',
    'menu_items',
    'orders',
    'order_items',
    'order_status_history',
    'order_drafts',
]


class DatabaseManager:
    """
    Database manager

    Owns one SQLite connection, transaction helpers and maintenance tasks.
    """

    def __init__(self, db_path: str, auto_connect: bool = False):
        """
        Args:
            db_path: database file path or ':memory:'
            auto_connect: connect immediately
        """
        self.db_path = db_path
        self.conn: Optional[sqlite3.Connection] = None
        self._is_connected = False

        self.logger = logging.getLogger(self.__class__.__name__)

        if auto_connect:
            self.connect()

    def connect(self) -> sqlite3.Connection:
        """
        Open the connection.

        Returns:
            sqlite3 connection with Row factory

        Raises:
            ConnectionError: when the database cannot be opened
        """
        try:
            if self.conn is not None:
                self.logger.warning("Connection already open, closing it first")
                self.close()

            if self.db_path != ':memory:':
                db_dir = os.path.dirname(self.db_path)
                if db_dir and not os.path.exists(db_dir):
                    os.makedirs(db_dir, exist_ok=True)
                    self.logger.info(f"Created database directory: {db_dir}")

            self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self.conn.row_factory = sqlite3.Row
            self._is_connected = True
            self.logger.debug(f"Connected to database: {self.db_path}")

            self._configure_database()

            return self.conn

        except sqlite3.Error as e:
            self.logger.error(f"Failed to connect to database: {str(e)}")
            raise ConnectionError(f"Cannot connect to database {self.db_path}: {str(e)}")

    def close(self):
        if self.conn is not None:
            try:
                self.conn.close()
                self.logger.debug("Database connection closed")
            except sqlite3.Error as e:
                self.logger.error(f"Error while closing connection: {str(e)}")
            finally:
                self.conn = None
                self._is_connected = False

    def _configure_database(self):
        """SQLite pragmas."""
        pragmas = [
            "PRAGMA foreign_keys = ON",
            "PRAGMA synchronous = NORMAL",
            "PRAGMA temp_store = MEMORY",
        ]
        if self.db_path != ':memory:':
            pragmas.append("PRAGMA journal_mode = WAL")

        try:
            for pragma in pragmas:
                self.conn.execute(pragma)
        except sqlite3.Error as e:
            self.logger.warning(f"Could not apply pragmas: {str(e)}")

    def is_connected(self) -> bool:
        return self._is_connected and self.conn is not None

    def ensure_connected(self):
        """
        Raises:
            ConnectionError: when connect() has not been called
        """
        if not self.is_connected():
            raise ConnectionError("Database is not connected, call connect() first")

    def execute_transaction(self, operations: List[Callable]) -> List[Any]:
        """
        Run operations serially inside one transaction.

        Args:
            operations: callables, each returning its result

        Returns:
            list of operation results

        Raises:
            Exception: the original error, after rollback
        """
        self.ensure_connected()

        if not operations:
            self.logger.warning("Empty transaction")
            return []

        results = []
        transaction_id = datetime.now().strftime("%Y%m%d%H%M%S%f")

        try:
            self.logger.debug(f"Transaction {transaction_id} started with {len(operations)} operation(s)")

            for operation in operations:
                results.append(operation())

            self.conn.commit()
            self.logger.debug(f"Transaction {transaction_id} committed")

            return results

        except Exception as e:
            self.logger.error(f"Transaction {transaction_id} failed: {type(e).__name__}: {str(e)}")
            try:
                self.conn.rollback()
                self.logger.info(f"Transaction {transaction_id} rolled back")
            except sqlite3.Error as rollback_error:
                self.logger.error(f"Rollback failed: {str(rollback_error)}")
            raise

    def execute_single(self, query: str, params: Optional[List] = None) -> sqlite3.Cursor:
        """
        Execute one statement; DDL and DML are committed immediately.

        Args:
            query: SQL statement
            params: positional parameters

        Returns:
            cursor
        """
        self.ensure_connected()

        try:
            result = self.conn.execute(query, params or [])

            if query.strip().upper().startswith(('CREATE', 'DROP', 'ALTER', 'INSERT', 'UPDATE', 'DELETE')):
                self.conn.commit()

            return result

        except sqlite3.Error as e:
            self.logger.error(f"Query failed: {query.strip()[:100]}..., error: {str(e)}")
            raise

    def fetch_all(self, query: str, params: Optional[List] = None) -> List[Dict[str, Any]]:
        """Rows as plain dictionaries."""
        self.ensure_connected()
        return [dict(row) for row in self.conn.execute(query, params or []).fetchall()]

    def fetch_one(self, query: str, params: Optional[List] = None) -> Optional[Dict[str, Any]]:
        self.ensure_connected()
        row = self.conn.execute(query, params or []).fetchone()
        return dict(row) if row is not None else None

    @contextmanager
    def transaction(self):
        """
        Transaction context manager

        Usage:
            with db_manager.transaction() as conn:
                conn.execute("INSERT ...")
        """
        self.ensure_connected()

        try:
            yield self.conn
            self.conn.commit()
        except Exception as e:
            self.logger.error(f"Transaction failed: {str(e)}")
            try:
                self.conn.rollback()
            except sqlite3.Error as rollback_error:
                self.logger.error(f"Rollback failed: {str(rollback_error)}")
            raise

    def check_integrity(self):
        """
        Verify the core tables exist and SQLite's own integrity check passes.

        Raises:
            RuntimeError: when a table is missing or the file is corrupt
        """
        self.ensure_connected()

        missing = []
        for table in CORE_TABLES:
            row = self.conn.execute(
                "SELECT COUNT(*) FROM sqlite_master WHERE type='table' AND name=?",
                (table,)
            ).fetchone()
            if not row or row[0] == 0:
                missing.append(table)

        if missing:
            raise RuntimeError(f"Missing core tables: {', '.join(missing)}")

        result = self.conn.execute("PRAGMA integrity_check").fetchone()
        if not result or result[0] != 'ok':
            raise RuntimeError(f"Integrity check failed: {result[0] if result else 'no result'}")

        self.logger.info("Database integrity check passed")

    def __enter__(self):
        if not self.is_connected():
            self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __del__(self):
        if self.is_connected():
            self.close()
