"""DRF exception handler producing the standard error envelope.

Wired through ``REST_FRAMEWORK["EXCEPTION_HANDLER"]``.  Framework errors
(validation, authentication, permission, throttling, 404) keep their status
code and headers; anything DRF does not recognise is a persistence-fatal or
programming error: it is logged in full and reported as a generic 500 so no
internal detail leaks to the client.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from modules.core.responses import error_detail, error_response

logger = structlog.get_logger(__name__)

VALIDATION_FAILED_MESSAGE = "Validation failed. Please check the following fields:"
INTERNAL_ERROR_MESSAGE = "Internal server error."


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    if isinstance(exc, Http404):
        exc = exceptions.NotFound(*exc.args)
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied(*exc.args)

    response = exception_handler(exc, context)
    view = context.get("view")

    if response is None or not isinstance(exc, exceptions.APIException):
        logger.exception(
            "api.unhandled_error",
            view=type(view).__name__ if view else None,
            error_type=type(exc).__name__,
        )
        return Response(
            error_response(
                INTERNAL_ERROR_MESSAGE,
                [error_detail("internal_error", INTERNAL_ERROR_MESSAGE)],
            ),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    errors = _flatten(exc.get_full_details())

    if isinstance(exc, exceptions.ValidationError):
        message = VALIDATION_FAILED_MESSAGE
    elif isinstance(exc.detail, str):
        message = str(exc.detail)
    else:
        message = errors[0]["detail"] if errors else str(exc)

    logger.info(
        "api.request_rejected",
        status_code=response.status_code,
        error_type=type(exc).__name__,
    )
    response.data = error_response(message, errors)
    return response


def _is_leaf(value: Any) -> bool:
    return isinstance(value, dict) and set(value) == {"message", "code"}


def _flatten(details: Any, field: Optional[str] = None) -> List[Dict[str, Any]]:
    """Turn DRF's nested ``get_full_details()`` output into a flat list."""
    if _is_leaf(details):
        entry = error_detail(str(details["code"]), str(details["message"]))
        if field:
            entry["field"] = field
        return [entry]

    flat: List[Dict[str, Any]] = []
    if isinstance(details, dict):
        for key, value in details.items():
            flat.extend(_flatten(value, key if field is None else f"{field}.{key}"))
    elif isinstance(details, list):
        for index, value in enumerate(details):
            if _is_leaf(value):
                flat.extend(_flatten(value, field))
            else:
                name = str(index) if field is None else f"{field}.{index}"
                flat.extend(_flatten(value, name))
    return flat
