# Classified results shared by the operations layer
# {success, code, meta, data}; routes render them with utils.response.outcome_response

from typing import Any, Dict, Optional


def success_outcome(data: Any = None, meta: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {"success": True, "code": "ok", "meta": meta or {}, "data": data}


def failure_outcome(code: str, meta: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {"success": False, "code": code, "meta": meta or {}, "data": None}
