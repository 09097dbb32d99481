from typing import Any, Dict, Optional


def success_response(message: str, data: Any = None, meta: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Standard success envelope returned by every route."""
    body: Dict[str, Any] = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    if meta is not None:
        body["meta"] = meta
    return body
