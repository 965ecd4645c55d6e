# Restaurant menu filtered to the train's arrival time

import sqlite3
import logging
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Query

from .models import MenuGroup, MenuItemInfo
from api.dependencies import get_config, get_database
from api.stations.models import restaurant_info
from db.manager import DatabaseManager
from db.availability_operations import AvailabilityOperations, group_menu_by_type, is_veg_like
from utils import error_codes
from utils.config import Config
from utils.pricing import paise_to_rupees
from utils.response import create_success_response, error_json_response
from utils.time_utils import format_hhmm
from utils.validators import validate_hhmm

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/menu", tags=["menu"])


def _item_info(item: Dict[str, Any]) -> MenuItemInfo:
    return MenuItemInfo(
        item_id=item['item_id'],
        item_code=item.get('item_code'),
        item_name=item['item_name'],
        item_description=item.get('item_description'),
        item_category=item.get('item_category'),
        cuisine=item.get('cuisine'),
        menu_type=item.get('menu_type'),
        start_time=item.get('start_time'),
        end_time=item.get('end_time'),
        price=paise_to_rupees(item['selling_price_paise']),
        is_veg=is_veg_like(item),
    )


@router.get("")
async def get_menu(
    restro: Optional[str] = Query(None, description="Restaurant code"),
    arrival: Optional[str] = Query(None, description="Arrival time HH:MM"),
    sort: str = Query("price", pattern="^(price|name)$", description="Order inside a menu type"),
    veg_only: bool = Query(False, description="Only Veg / Jain items"),
    db: DatabaseManager = Depends(get_database),
    cfg: Config = Depends(get_config)
):
    """
    Items served at the arrival time, ordered by menu type rank then price or name.
    """
    if not (restro or '').strip():
        return error_json_response(error_codes.MISSING_PARAMS, meta={'missing': ['restro']})
    if not arrival or not validate_hhmm(arrival):
        return error_json_response(error_codes.INVALID_ARRIVAL_TIME, meta={'arrival': arrival})

    try:
        availability = AvailabilityOperations(db)
        restaurant = availability.get_restaurant(restro)
        if restaurant is None or not restaurant['is_active']:
            return error_json_response(error_codes.RESTRO_NOT_FOUND, meta={'restro_code': restro.strip().upper()})

        items = availability.visible_menu(
            restaurant['restro_code'],
            arrival,
            secondary=sort,
            veg_only=veg_only,
            menu_type_order=cfg.get_ordering_config()['menu_type_order']
        )
    except sqlite3.Error as e:
        logger.error(f"Menu lookup failed for {restro!r}: {str(e)}")
        return error_json_response(error_codes.DB_ERROR)

    groups = [
        MenuGroup(menu_type=g['menu_type'], items=[_item_info(i) for i in g['items']]).model_dump()
        for g in group_menu_by_type(items)
    ]

    return create_success_response(
        data={
            'restaurant': restaurant_info(restaurant),
            'arrival': format_hhmm(arrival),
            'items': [_item_info(i).model_dump() for i in items],
            'groups': groups,
        },
        message=f"{len(items)} item(s) available"
    )
