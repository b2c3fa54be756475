"""
API error types and the unified DRF exception handler.

Views and services raise :class:`ApiError` subclasses; the handler turns
them, DRF's own exceptions and anything unexpected into one envelope::

    {"ok": false, "error": "<message>", "code": "<code>", "details": {...}}
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from rest_framework import exceptions as drf_exceptions
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500
    code = 'server_error'
    default_message = 'Internal server error'

    def __init__(self, message: Optional[str] = None, details: Optional[Any] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class InvalidPayload(ApiError):
    status_code = 400
    code = 'invalid'
    default_message = 'Invalid request'


class AuthFailed(ApiError):
    status_code = 401
    code = 'unauthorized'
    default_message = 'Invalid credentials'


class NotFoundError(ApiError):
    status_code = 404
    code = 'not_found'
    default_message = 'Not found'


class ConflictError(ApiError):
    status_code = 409
    code = 'conflict'
    default_message = 'Conflict'


class GoneError(ApiError):
    status_code = 410
    code = 'gone'
    default_message = 'Gone'


class DeliveryFailed(ApiError):
    code = 'delivery_failed'
    default_message = 'Delivery failed'


def error_body(message: Any, code: str, details: Any = None) -> dict:
    body: dict[str, Any] = {'ok': False, 'error': message, 'code': code}
    if details:
        body['details'] = details
    return body


def api_exception_handler(exc, context):
    if isinstance(exc, ApiError):
        if exc.status_code >= 500:
            logger.error('%s: %s', exc.code, exc.message)
        return Response(error_body(exc.message, exc.code, exc.details), status=exc.status_code)

    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.exception('Unhandled error in %s', type(view).__name__ if view else 'view', exc_info=exc)
        return Response(error_body('Internal server error', 'server_error'), status=500)

    # normalize response
    if isinstance(exc, drf_exceptions.ValidationError):
        return Response(error_body('Invalid request', 'invalid', resp.data), status=resp.status_code)
    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = str(resp.data)
    code = getattr(exc, 'default_code', 'api_error')
    return Response(error_body(str(detail), code), status=resp.status_code, headers=_passthrough_headers(resp))


def _passthrough_headers(resp) -> dict:
    return {k: v for k, v in resp.items() if k in ('WWW-Authenticate', 'Retry-After')}
