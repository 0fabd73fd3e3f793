from typing import Any, Dict


def ok(data: Any, message: str | None = None) -> Dict[str, Any]:
    """Return a success envelope."""
    body: Dict[str, Any] = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body


def err(
    code: int | str,
    message: str,
    details: Dict[str, Any] | None = None,
) -> Dict[str, Any]:
    """Return an error envelope."""
    from ..middlewares.request_id import current_request_id

    body: Dict[str, Any] = {
        "success": False,
        "message": message,
        "code": code,
        "request_id": current_request_id(),
    }
    if details:
        body["details"] = details
    return body
