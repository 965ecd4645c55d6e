# Machine-readable error codes and their HTTP status
# One table for every endpoint

# malformed or missing input
MISSING_PARAMS = 'missing_params'
INVALID_DATE = 'invalid_date'
INVALID_ARRIVAL_TIME = 'invalid_arrival_time'
EMPTY_CART = 'empty_cart'
INVALID_PAYMENT_MODE = 'invalid_payment_mode'
INVALID_MOBILE = 'invalid_mobile'
INVALID_STATUS = 'invalid_status'

# not found
TRAIN_NOT_FOUND = 'train_not_found'
STATION_NOT_ON_ROUTE = 'station_not_on_route'
STATION_NOT_FOUND = 'station_not_found'
RESTRO_NOT_FOUND = 'restro_not_found'
ORDER_NOT_FOUND = 'order_not_found'
DRAFT_NOT_FOUND = 'draft_not_found'

# business-rule rejections, in resolver check order
NOT_RUNNING_ON_DATE = 'not_running_on_date'
WEEKLY_OFF = 'weekly_off'
HOLIDAY_CLOSED = 'holiday_closed'
RESTRO_CUTOFF = 'restro_cutoff'
CUTOFF_EXCEEDED = 'cutoff_exceeded'
RESTRO_TIME_MISMATCH = 'restro_time_mismatch'
ITEM_UNAVAILABLE = 'item_unavailable'
ITEM_TIME_MISMATCH = 'item_time_mismatch'
MIN_ORDER_NOT_MET = 'min_order_not_met'

# state conflicts
STATUS_CONFLICT = 'status_conflict'

# transport
REQUEST_TOO_LARGE = 'request_too_large'
RATE_LIMITED = 'rate_limited'

# backend
DB_ERROR = 'db_error'
SERVER_ERROR = 'server_error'

_STATUS = {
    MISSING_PARAMS: 400,
    INVALID_DATE: 400,
    INVALID_ARRIVAL_TIME: 400,
    EMPTY_CART: 400,
    INVALID_PAYMENT_MODE: 400,
    INVALID_MOBILE: 400,
    INVALID_STATUS: 400,
    TRAIN_NOT_FOUND: 404,
    STATION_NOT_ON_ROUTE: 404,
    STATION_NOT_FOUND: 404,
    RESTRO_NOT_FOUND: 404,
    ORDER_NOT_FOUND: 404,
    DRAFT_NOT_FOUND: 404,
    NOT_RUNNING_ON_DATE: 422,
    WEEKLY_OFF: 422,
    HOLIDAY_CLOSED: 422,
    RESTRO_CUTOFF: 422,
    CUTOFF_EXCEEDED: 422,
    RESTRO_TIME_MISMATCH: 422,
    ITEM_UNAVAILABLE: 422,
    ITEM_TIME_MISMATCH: 422,
    MIN_ORDER_NOT_MET: 422,
    STATUS_CONFLICT: 409,
    REQUEST_TOO_LARGE: 413,
    RATE_LIMITED: 429,
    DB_ERROR: 500,
    SERVER_ERROR: 500,
}

MESSAGES = {
    MISSING_PARAMS: "Required parameters are missing or malformed",
    INVALID_DATE: "Date must be in YYYY-MM-DD format",
    INVALID_ARRIVAL_TIME: "Arrival time is missing or invalid",
    EMPTY_CART: "Cart has no items",
    INVALID_PAYMENT_MODE: "Unsupported payment mode",
    INVALID_MOBILE: "Mobile number must be a valid 10-digit number",
    INVALID_STATUS: "Unknown order status",
    TRAIN_NOT_FOUND: "Train not found",
    STATION_NOT_ON_ROUTE: "Train does not stop at this station",
    STATION_NOT_FOUND: "Station not found",
    RESTRO_NOT_FOUND: "Restaurant not available at this station",
    ORDER_NOT_FOUND: "Order not found",
    DRAFT_NOT_FOUND: "Order draft not found",
    NOT_RUNNING_ON_DATE: "Train does not run on the selected date",
    WEEKLY_OFF: "Restaurant is closed on this weekday",
    HOLIDAY_CLOSED: "Restaurant is closed for a holiday",
    RESTRO_CUTOFF: "Booking closed for this restaurant",
    CUTOFF_EXCEEDED: "Booking closed for this delivery",
    RESTRO_TIME_MISMATCH: "Restaurant is closed at the train's arrival time",
    ITEM_UNAVAILABLE: "Some items are not available",
    ITEM_TIME_MISMATCH: "Some items are not served at the arrival time",
    MIN_ORDER_NOT_MET: "Cart total is below the restaurant's minimum order",
    STATUS_CONFLICT: "Order status cannot change",
    REQUEST_TOO_LARGE: "Request entity too large",
    RATE_LIMITED: "Too many requests",
    DB_ERROR: "Database error",
    SERVER_ERROR: "Internal server error",
}


def http_status_for(code: str) -> int:
    """HTTP status for an error code; unknown codes are server errors."""
    return _STATUS.get(code, 500)


def message_for(code: str) -> str:
    return MESSAGES.get(code, MESSAGES[SERVER_ERROR])
