# Order drafts
# Checkout session state stored as an opaque JSON blob per draft_id

import json
import uuid
import logging
from typing import Any, Dict, Optional

from .manager import DatabaseManager


class DraftOperations:
    """
    Draft lifecycle: created at search, read and replaced during checkout,
    deleted when the order is committed.
    """
    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager
        self.logger = logging.getLogger(self.__class__.__name__)

    def _row_to_draft(self, row: Dict[str, Any]) -> Dict[str, Any]:
        return {
            'draft_id': row['draft_id'],
            'payload': json.loads(row['payload']),
            'created_at': row['created_at'],
            'updated_at': row['updated_at'],
        }

    def create_draft(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        draft_id = uuid.uuid4().hex
        self.db.execute_single(
            "INSERT INTO order_drafts (draft_id, payload) VALUES (?, ?)",
            [draft_id, json.dumps(payload)]
        )
        self.logger.debug(f"Draft {draft_id} created")
        return self.get_draft(draft_id)

    def get_draft(self, draft_id: str) -> Optional[Dict[str, Any]]:
        row = self.db.fetch_one("SELECT * FROM order_drafts WHERE draft_id = ?", [draft_id])
        return self._row_to_draft(row) if row else None

    def update_draft(self, draft_id: str, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Replace the stored payload; None when the draft does not exist."""
        cursor = self.db.execute_single("""
            UPDATE order_drafts
            SET payload = ?, updated_at = CURRENT_TIMESTAMP
            WHERE draft_id = ?
        """, [json.dumps(payload), draft_id])
        if cursor.rowcount == 0:
            return None
        return self.get_draft(draft_id)

    def delete_draft(self, draft_id: str) -> bool:
        cursor = self.db.execute_single("DELETE FROM order_drafts WHERE draft_id = ?", [draft_id])
        deleted = cursor.rowcount > 0
        if deleted:
            self.logger.debug(f"Draft {draft_id} cleared")
        return deleted
