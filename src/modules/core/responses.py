"""Response envelope helpers.

Envelope shape::

    {"success": bool, "message": str, "object": <payload|null>, "errors": <list|null>}

A success carries ``object`` and ``errors=None``; a failure carries a list of
error details and ``object=None``.  Never both.

Paged listings add ``pageNumber``, ``pageSize`` and ``totalSize`` beside
``object``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


def success_response(message: str, data: Any = None) -> Dict[str, Any]:
    return {
        "success": True,
        "message": message,
        "object": data,
        "errors": None,
    }


def paginated_response(
    message: str,
    data: List[Any],
    page_number: int,
    page_size: int,
    total_size: int,
) -> Dict[str, Any]:
    return {
        "success": True,
        "message": message,
        "object": data,
        "pageNumber": page_number,
        "pageSize": page_size,
        "totalSize": total_size,
        "errors": None,
    }


def error_response(
    message: str, errors: Optional[List[Dict[str, Any]]] = None
) -> Dict[str, Any]:
    return {
        "success": False,
        "message": message,
        "object": None,
        "errors": errors or [],
    }


def error_detail(code: str, detail: str, **extra: Any) -> Dict[str, Any]:
    """Single entry of the ``errors`` list."""
    return {"code": code, "detail": detail, **extra}
