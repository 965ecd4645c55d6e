# Order draft lifecycle

import sqlite3
import logging
from fastapi import APIRouter, Depends, Path

from .models import OrderDraft
from api.dependencies import get_database
from db.manager import DatabaseManager
from db.draft_operations import DraftOperations
from utils import error_codes
from utils.pricing import cart_lines
from utils.response import create_success_response, error_json_response

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/drafts", tags=["drafts"])


def _clean(draft: OrderDraft) -> dict:
    """Draft payload with empty cart lines removed."""
    payload = draft.model_dump()
    payload['cart'] = cart_lines(payload['cart'])
    return payload


def _render(stored: dict) -> dict:
    return {
        'draft_id': stored['draft_id'],
        'draft': OrderDraft(**stored['payload']).model_dump(),
        'created_at': stored['created_at'],
        'updated_at': stored['updated_at'],
    }


@router.post("")
async def create_draft(
    draft: OrderDraft,
    db: DatabaseManager = Depends(get_database)
):
    """Start a checkout session."""
    try:
        stored = DraftOperations(db).create_draft(_clean(draft))
    except sqlite3.Error as e:
        logger.error(f"Draft creation failed: {str(e)}")
        return error_json_response(error_codes.DB_ERROR)
    return create_success_response(data=_render(stored), message="Draft created")


@router.get("/{draft_id}")
async def get_draft(
    draft_id: str = Path(..., description="Draft ID"),
    db: DatabaseManager = Depends(get_database)
):
    try:
        stored = DraftOperations(db).get_draft(draft_id)
    except sqlite3.Error as e:
        logger.error(f"Draft lookup failed for {draft_id}: {str(e)}")
        return error_json_response(error_codes.DB_ERROR)

    if stored is None:
        return error_json_response(error_codes.DRAFT_NOT_FOUND, meta={'draft_id': draft_id})
    return create_success_response(data=_render(stored))


@router.put("/{draft_id}")
async def replace_draft(
    draft: OrderDraft,
    draft_id: str = Path(..., description="Draft ID"),
    db: DatabaseManager = Depends(get_database)
):
    """Replace the draft's journey, outlet and cart."""
    try:
        stored = DraftOperations(db).update_draft(draft_id, _clean(draft))
    except sqlite3.Error as e:
        logger.error(f"Draft update failed for {draft_id}: {str(e)}")
        return error_json_response(error_codes.DB_ERROR)

    if stored is None:
        return error_json_response(error_codes.DRAFT_NOT_FOUND, meta={'draft_id': draft_id})
    return create_success_response(data=_render(stored), message="Draft updated")


@router.delete("/{draft_id}")
async def delete_draft(
    draft_id: str = Path(..., description="Draft ID"),
    db: DatabaseManager = Depends(get_database)
):
    try:
        deleted = DraftOperations(db).delete_draft(draft_id)
    except sqlite3.Error as e:
        logger.error(f"Draft deletion failed for {draft_id}: {str(e)}")
        return error_json_response(error_codes.DB_ERROR)

    if not deleted:
        return error_json_response(error_codes.DRAFT_NOT_FOUND, meta={'draft_id': draft_id})
    return create_success_response(data={'draft_id': draft_id}, message="Draft cleared")
