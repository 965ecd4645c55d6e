# Unified API response envelope

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse

from .error_codes import http_status_for, message_for


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


def create_success_response(
    data: Any = None,
    message: str = "OK",
    meta: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Success envelope

    Args:
        data: payload
        message: human-readable message
        meta: optional context for rendering

    Returns:
        response dictionary
    """
    return {
        "success": True,
        "data": data,
        "error": None,
        "meta": meta or {},
        "message": message,
        "timestamp": _timestamp()
    }


def create_error_response(
    error: str,
    meta: Optional[Dict[str, Any]] = None,
    message: Optional[str] = None,
    data: Any = None
) -> Dict[str, Any]:
    """
    Error envelope

    Args:
        error: machine-readable error code
        meta: structured context (arrival time, offending items, ...)
        message: human-readable message, defaults to the code's message
        data: optional payload

    Returns:
        response dictionary
    """
    return {
        "success": False,
        "data": data,
        "error": error,
        "meta": meta or {},
        "message": message or message_for(error),
        "timestamp": _timestamp()
    }


def error_json_response(
    error: str,
    meta: Optional[Dict[str, Any]] = None,
    message: Optional[str] = None,
    status_code: Optional[int] = None
) -> JSONResponse:
    """Error envelope wrapped with the HTTP status mapped from the code."""
    return JSONResponse(
        status_code=status_code or http_status_for(error),
        content=create_error_response(error, meta=meta, message=message)
    )


def outcome_response(outcome: Dict[str, Any], message: str = "OK"):
    """
    Render a resolver outcome ({success, code, meta, data}).

    Successful outcomes return the plain envelope (200); rejections return
    a JSONResponse with the mapped status.
    """
    if outcome.get("success"):
        return create_success_response(data=outcome.get("data"), message=message, meta=outcome.get("meta"))
    return error_json_response(outcome["code"], meta=outcome.get("meta"))


def create_pagination_response(
    items: list,
    total_count: int,
    current_page: int,
    per_page: int,
    message: str = "OK"
) -> Dict[str, Any]:
    """Paged list envelope."""
    total_pages = (total_count + per_page - 1) // per_page
    return create_success_response(
        data={
            "items": items,
            "pagination": {
                "total_count": total_count,
                "current_page": current_page,
                "per_page": per_page,
                "total_pages": total_pages,
                "has_next": current_page < total_pages,
                "has_prev": current_page > 1
            }
        },
        message=message
    )
