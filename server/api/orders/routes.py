# Order eligibility, quotes, placement and back-office listing

import sqlite3
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Path, Query

from .models import (
    CreateOrderRequest, CreateOrderResponse, EligibilityRequest,
    QuoteRequest, UpdateOrderStatusRequest
)
from api.dependencies import get_clock, get_config, get_database, get_holiday_service
from api.holidays import HolidayService
from db.manager import DatabaseManager
from db.core_operations import CoreOperations
from db.draft_operations import DraftOperations
from db.eligibility_operations import Clock, EligibilityOperations
from utils import error_codes
from utils.config import Config
from utils.response import (
    create_pagination_response, create_success_response, error_json_response, outcome_response
)
from utils.validators import (
    validate_date, validate_mobile, validate_order_status, validate_payment_mode, validate_pnr
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/orders", tags=["orders"])


def _eligibility_ops(db, cfg, holidays, clock) -> EligibilityOperations:
    return EligibilityOperations(db, cfg.get_ordering_config(), holidays, clock)


def _resolver_request(request: EligibilityRequest) -> dict:
    return {
        'train': request.train,
        'station_code': request.station_code,
        'date': request.date,
        'restro_code': request.restro_code,
        'boarding': request.boarding,
        'items': [line.model_dump() for line in request.items],
    }


@router.post("/eligibility")
async def check_eligibility(
    request: EligibilityRequest,
    db: DatabaseManager = Depends(get_database),
    cfg: Config = Depends(get_config),
    holidays: HolidayService = Depends(get_holiday_service),
    clock: Clock = Depends(get_clock)
):
    """
    Whether an order for this train, station, date and cart can be placed.

    Rejections carry a machine-readable code and the context needed to
    explain it (arrival time, opening hours, offending items, minimum order).
    """
    outcome = await _eligibility_ops(db, cfg, holidays, clock).resolve(_resolver_request(request))
    if not outcome['success']:
        logger.info(f"Order not eligible: {outcome['code']} {outcome['meta']}")
    return outcome_response(outcome, message="Order can be placed")


@router.post("/quote")
async def quote_order(
    request: QuoteRequest,
    db: DatabaseManager = Depends(get_database),
    cfg: Config = Depends(get_config),
    clock: Clock = Depends(get_clock)
):
    """Subtotal, GST, platform charge and total for a cart."""
    outcome = _eligibility_ops(db, cfg, None, clock).quote_cart(
        request.restro_code, [line.model_dump() for line in request.items]
    )
    return outcome_response(outcome)


@router.post("")
async def create_order(
    request: CreateOrderRequest,
    db: DatabaseManager = Depends(get_database),
    cfg: Config = Depends(get_config),
    holidays: HolidayService = Depends(get_holiday_service),
    clock: Clock = Depends(get_clock)
):
    """
    Place an order.

    Eligibility and prices are recomputed on the server; a client-side
    platform charge is only compared and logged.
    """
    ordering = cfg.get_ordering_config()

    if not validate_mobile(request.customer_mobile):
        return error_json_response(error_codes.INVALID_MOBILE, meta={'customer_mobile': request.customer_mobile})
    if request.pnr and not validate_pnr(request.pnr):
        return error_json_response(error_codes.MISSING_PARAMS, meta={'invalid': ['pnr']})
    if not validate_payment_mode(request.payment_mode, ordering['payment_modes']):
        return error_json_response(error_codes.INVALID_PAYMENT_MODE, meta={
            'payment_mode': request.payment_mode,
            'allowed': ordering['payment_modes'],
        })

    outcome = await _eligibility_ops(db, cfg, holidays, clock).resolve(_resolver_request(request))
    if not outcome['success']:
        logger.info(f"Order rejected: {outcome['code']} {outcome['meta']}")
        return outcome_response(outcome)

    resolution = outcome['data']
    pricing = resolution['pricing']
    if request.platform_charge is not None and abs(request.platform_charge - pricing['platform_charge']) >= 0.01:
        logger.warning(
            f"Client platform charge {request.platform_charge} differs from configured "
            f"{pricing['platform_charge']}, using configured value"
        )

    try:
        order = CoreOperations(db).create_order(
            resolution,
            {
                'customer_name': request.customer_name,
                'customer_mobile': request.customer_mobile.strip(),
                'pnr': request.pnr,
                'coach': request.coach,
                'seat': request.seat,
                'payment_mode': request.payment_mode,
            },
            now=clock()
        )
    except sqlite3.Error as e:
        logger.error(f"Order creation failed: {str(e)}", exc_info=True)
        return error_json_response(error_codes.DB_ERROR)

    # order already committed, draft clearing is best-effort
    if request.draft_id:
        try:
            DraftOperations(db).delete_draft(request.draft_id)
        except sqlite3.Error as e:
            logger.warning(f"Draft {request.draft_id} not cleared after order {order['order_number']}: {e}")

    response_data = CreateOrderResponse(**{k: order[k] for k in CreateOrderResponse.model_fields})
    return create_success_response(
        data=response_data.model_dump(),
        message=f"Order {order['order_number']} placed, total ₹{order['total']:.2f}"
    )


@router.get("")
async def list_orders(
    status: Optional[str] = Query(None, description="Order status"),
    date: Optional[str] = Query(None, description="Arrival date YYYY-MM-DD"),
    restro_code: Optional[str] = Query(None, description="Restaurant code"),
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    db: DatabaseManager = Depends(get_database)
):
    """Orders, newest first, filtered by status, arrival date and restaurant."""
    if status and not validate_order_status(status.upper()):
        return error_json_response(error_codes.INVALID_STATUS, meta={'status': status})
    if date and not validate_date(date):
        return error_json_response(error_codes.INVALID_DATE, meta={'date': date})

    try:
        result = CoreOperations(db).list_orders(
            status=status, date=date, restro_code=restro_code,
            offset=(page - 1) * per_page, limit=per_page
        )
    except sqlite3.Error as e:
        logger.error(f"Order listing failed: {str(e)}")
        return error_json_response(error_codes.DB_ERROR)

    return create_pagination_response(result['orders'], result['total_count'], page, per_page)


@router.get("/{order_number}")
async def get_order(
    order_number: str = Path(..., description="Order number"),
    db: DatabaseManager = Depends(get_database)
):
    """Order detail with item lines and status history."""
    try:
        order = CoreOperations(db).get_order(order_number)
    except sqlite3.Error as e:
        logger.error(f"Order lookup failed for {order_number}: {str(e)}")
        return error_json_response(error_codes.DB_ERROR)

    if order is None:
        return error_json_response(error_codes.ORDER_NOT_FOUND, meta={'order_number': order_number})
    return create_success_response(data=order)


@router.patch("/{order_number}/status")
async def update_order_status(
    request: UpdateOrderStatusRequest,
    order_number: str = Path(..., description="Order number"),
    db: DatabaseManager = Depends(get_database)
):
    """Move an order along PLACED -> ACCEPTED -> DISPATCHED -> DELIVERED, or cancel it."""
    if not validate_order_status(request.status.upper()):
        return error_json_response(error_codes.INVALID_STATUS, meta={'status': request.status})

    try:
        result = CoreOperations(db).update_order_status(order_number, request.status, request.note)
    except LookupError:
        return error_json_response(error_codes.ORDER_NOT_FOUND, meta={'order_number': order_number})
    except ValueError as e:
        return error_json_response(error_codes.STATUS_CONFLICT, meta={'order_number': order_number}, message=str(e))
    except sqlite3.Error as e:
        logger.error(f"Status update failed for {order_number}: {str(e)}")
        return error_json_response(error_codes.DB_ERROR)

    return create_success_response(data=result, message=f"Order {order_number} is now {result['new_status']}")
