# core/exceptions.py

"""
API EXCEPTION HANDLER

Uniform error envelope for every endpoint:
- validation (DRF or Django)  -> 422 {"message", "errors": {field: [...]}}
- not found / auth / perms    -> DRF status with {"message"}
- anything else               -> 500 {"message": "Server error"}
                                 (+ "error" only when DEBUG is on)
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.views import set_rollback

logger = logging.getLogger(__name__)

VALIDATION_FAILED = "Validation failed"


def _django_errors(exc: DjangoValidationError) -> dict:
    if hasattr(exc, "error_dict"):
        return {field: [str(m) for m in msgs] for field, msgs in exc.message_dict.items()}
    return {"non_field_errors": [str(m) for m in exc.messages]}


def _drf_errors(data) -> dict:
    if isinstance(data, dict):
        return data
    if isinstance(data, list):
        return {"non_field_errors": data}
    return {"non_field_errors": [str(data)]}


def _first_message(errors: dict) -> str | None:
    for msgs in errors.values():
        if isinstance(msgs, (list, tuple)) and msgs:
            return str(msgs[0])
        if isinstance(msgs, str):
            return msgs
    return None


def api_exception_handler(exc, context):
    if isinstance(exc, DjangoValidationError):
        set_rollback()
        errors = _django_errors(exc)
        status_code = getattr(exc, "status_code", status.HTTP_422_UNPROCESSABLE_ENTITY)
        message = _first_message(errors) if not hasattr(exc, "error_dict") else None
        return Response(
            {"message": message or VALIDATION_FAILED, "errors": errors},
            status=status_code,
        )

    response = drf_exception_handler(exc, context)

    if response is not None:
        if isinstance(exc, exceptions.ValidationError):
            response.data = {
                "message": VALIDATION_FAILED,
                "errors": _drf_errors(response.data),
            }
            response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
            return response

        detail = response.data.get("detail") if isinstance(response.data, dict) else None
        response.data = {"message": str(detail) if detail else "Request failed"}
        return response

    view = context.get("view")
    logger.exception(
        "Unhandled API error",
        extra={"view": view.__class__.__name__ if view else None},
    )

    body = {"message": "Server error"}
    if settings.DEBUG:
        body["error"] = str(exc)
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
