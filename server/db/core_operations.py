# Order persistence
# Order + item lines in one transaction, status history appended best-effort

import json
import random
import sqlite3
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from .manager import DatabaseManager
from utils.normalizers import normalize_code
from utils.pricing import paise_to_rupees
from utils.validators import validate_order_status

# statuses that can no longer change
TERMINAL_STATUSES = ('DELIVERED', 'CANCELLED')


class CoreOperations:
    """
    Order write and read operations.
    """
    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager
        self.logger = logging.getLogger(self.__class__.__name__)

    def _generate_order_number(self, now: Optional[datetime] = None) -> str:
        """RE<yymmdd><4 random digits>, re-drawn until unused."""
        prefix = f"RE{(now or datetime.now()).strftime('%y%m%d')}"
        for _ in range(20):
            candidate = f"{prefix}{random.randint(0, 9999):04d}"
            exists = self.db.conn.execute(
                "SELECT 1 FROM orders WHERE order_number = ?", [candidate]
            ).fetchone()
            if not exists:
                return candidate
        raise RuntimeError(f"Could not allocate an order number for {prefix}")

    def _append_history(self, order_number: str, old_status: Optional[str], new_status: str,
                        note: Optional[str] = None, changed_by: str = 'system'):
        self.db.conn.execute("""
            INSERT INTO order_status_history (order_number, old_status, new_status, note, changed_by)
            VALUES (?, ?, ?, ?, ?)
        """, [order_number, old_status, new_status, note, changed_by])

    def create_order(self, resolution: Dict[str, Any], details: Dict[str, Any],
                     now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Persist an order from a successful eligibility resolution.

        Args:
            resolution: data of a successful eligibility outcome (stop, restaurant,
                priced lines, pricing)
            details: passenger and payment details (customer_name, customer_mobile,
                pnr, coach, seat, payment_mode)
            now: creation time, used for the order number date

        Returns:
            created order summary

        Raises:
            sqlite3.Error: order or item insert failed (rolled back)
        """
        pricing = resolution['pricing']
        restaurant = resolution['restaurant']
        stop = resolution['stop']
        train = resolution['train']
        lines: List[Dict[str, Any]] = resolution['lines']
        payment_mode = str(details['payment_mode']).upper()

        journey_payload = json.dumps({
            'train': train,
            'stop': stop,
            'arrival_date': resolution['arrival_date'],
            'arrival_time': resolution['arrival_time'],
        })

        def create_order_operation():
            order_number = self._generate_order_number(now)

            self.db.conn.execute("""
                INSERT INTO orders (
                    order_number, order_status, train_number, train_name, pnr, coach, seat,
                    restro_code, restro_name, station_code, station_name,
                    arrival_date, arrival_time, customer_name, customer_mobile,
                    subtotal_paise, gst_paise, platform_charge_paise, total_paise,
                    payment_mode, payment_status, journey_payload
                ) VALUES (?, 'PLACED', ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 'PENDING', ?)
            """, [
                order_number, str(train['train_number']), train.get('train_name'),
                details.get('pnr'), details.get('coach'), details.get('seat'),
                restaurant['restro_code'], restaurant.get('restro_name'),
                stop['station_code'], stop.get('station_name'),
                resolution['arrival_date'], resolution['arrival_time'],
                details.get('customer_name'), details['customer_mobile'],
                pricing['subtotal_paise'], pricing['gst_paise'],
                pricing['platform_charge_paise'], pricing['total_paise'],
                payment_mode, journey_payload,
            ])

            for line in lines:
                self.db.conn.execute("""
                    INSERT INTO order_items (
                        order_number, item_id, item_code, item_name, item_category, menu_type,
                        base_price_paise, gst_percent, selling_price_paise, quantity, line_total_paise
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, [
                    order_number, line['item_id'], line.get('item_code'), line['item_name'],
                    line.get('item_category'), line.get('menu_type'),
                    line.get('base_price_paise'), line.get('gst_percent'),
                    line['unit_price_paise'], line['qty'], line['line_total_paise'],
                ])

            return order_number

        order_number = self.db.execute_transaction([create_order_operation])[0]

        # audit trail is best-effort; the order already exists
        history_recorded = True
        try:
            with self.db.transaction():
                self._append_history(order_number, None, 'PLACED', 'Order placed')
        except sqlite3.Error as e:
            history_recorded = False
            self.logger.warning(f"Status history not recorded for {order_number}: {e}")

        self.logger.info(
            f"Order {order_number} placed: {restaurant['restro_code']} @ {stop['station_code']} "
            f"{resolution['arrival_date']} {resolution['arrival_time']}, total {pricing['total_paise']} paise"
        )

        return {
            'order_number': order_number,
            'order_status': 'PLACED',
            'payment_mode': payment_mode,
            'payment_status': 'PENDING',
            'arrival_date': resolution['arrival_date'],
            'arrival_time': resolution['arrival_time'],
            'restro_code': restaurant['restro_code'],
            'station_code': stop['station_code'],
            'subtotal': pricing['subtotal'],
            'gst': pricing['gst'],
            'platform_charge': pricing['platform_charge'],
            'total': pricing['total'],
            'total_paise': pricing['total_paise'],
            'history_recorded': history_recorded,
        }

    def update_order_status(self, order_number: str, new_status: str,
                            note: Optional[str] = None, changed_by: str = 'admin') -> Dict[str, Any]:
        """
        Move an order to a new status and record the change.

        Raises:
            ValueError: unknown status, terminal order or unchanged status
            LookupError: unknown order
        """
        new_status = str(new_status or '').upper()
        if not validate_order_status(new_status):
            raise ValueError(f"Unknown order status: {new_status}")

        def update_status_operation():
            row = self.db.conn.execute(
                "SELECT order_status FROM orders WHERE order_number = ?", [order_number]
            ).fetchone()
            if not row:
                raise LookupError(f"Order {order_number} not found")

            old_status = row[0]
            if old_status in TERMINAL_STATUSES:
                raise ValueError(f"Order {order_number} is already {old_status}")
            if old_status == new_status:
                raise ValueError(f"Order {order_number} is already {new_status}")

            self.db.conn.execute(
                "UPDATE orders SET order_status = ? WHERE order_number = ?",
                [new_status, order_number]
            )
            self._append_history(order_number, old_status, new_status, note, changed_by)
            return {'order_number': order_number, 'old_status': old_status, 'new_status': new_status}

        return self.db.execute_transaction([update_status_operation])[0]

    def _format_order(self, row: Dict[str, Any]) -> Dict[str, Any]:
        order = dict(row)
        order.pop('journey_payload', None)
        for key in ('subtotal', 'gst', 'platform_charge', 'total'):
            order[key] = paise_to_rupees(order.get(f'{key}_paise') or 0)
        return order

    def list_orders(self, status: Optional[str] = None, date: Optional[str] = None,
                    restro_code: Optional[str] = None, offset: int = 0, limit: int = 20) -> Dict[str, Any]:
        """
        Back-office order listing, newest first.

        Args:
            status: order status filter
            date: arrival date filter (YYYY-MM-DD)
            restro_code: restaurant filter
            offset: rows to skip
            limit: page size (1-100)

        Returns:
            {orders, total_count}
        """
        if offset < 0 or not (1 <= limit <= 100):
            raise ValueError("offset must be >= 0 and limit between 1 and 100")

        where_conditions = []
        params: List[Any] = []

        if status:
            where_conditions.append("order_status = ?")
            params.append(status.upper())
        if date:
            where_conditions.append("arrival_date = ?")
            params.append(date)
        if restro_code:
            where_conditions.append("restro_code = ?")
            params.append(normalize_code(restro_code))

        where_clause = f"WHERE {' AND '.join(where_conditions)}" if where_conditions else ""

        rows = self.db.fetch_all(f"""
            SELECT * FROM orders
            {where_clause}
            ORDER BY created_at DESC, order_id DESC
            LIMIT ? OFFSET ?
        """, params + [limit, offset])

        total_count = self.db.conn.execute(
            f"SELECT COUNT(*) FROM orders {where_clause}", params
        ).fetchone()[0]

        return {'orders': [self._format_order(r) for r in rows], 'total_count': total_count}

    def get_order(self, order_number: str) -> Optional[Dict[str, Any]]:
        """Order with its item lines and status history, or None."""
        row = self.db.fetch_one("SELECT * FROM orders WHERE order_number = ?", [order_number])
        if row is None:
            return None

        order = self._format_order(row)
        order['journey'] = json.loads(row['journey_payload']) if row.get('journey_payload') else None

        items = self.db.fetch_all("""
            SELECT item_id, item_code, item_name, item_category, menu_type,
                   selling_price_paise, quantity, line_total_paise
            FROM order_items
            WHERE order_number = ?
            ORDER BY order_item_id ASC
        """, [order_number])
        for item in items:
            item['unit_price'] = paise_to_rupees(item['selling_price_paise'])
            item['line_total'] = paise_to_rupees(item['line_total_paise'])
        order['items'] = items

        order['history'] = self.db.fetch_all("""
            SELECT old_status, new_status, note, changed_by, changed_at
            FROM order_status_history
            WHERE order_number = ?
            ORDER BY history_id ASC
        """, [order_number])

        return order
