"""
Error types raised by the service layer and the DRF exception handler.

Services raise the ``APIException`` subclasses below; views never catch
them.  ``api_exception_handler`` renders every error, including DRF's
own validation/auth errors, as ``{"success": false, "message": ...}``.
"""
from __future__ import annotations

import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = 'Server error.'


class ValidationError(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid request.'
    default_code = 'invalid'


class NotFoundError(exceptions.APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'


class QuotaExceededError(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Daily booking limit reached.'
    default_code = 'quota_exceeded'


class ConflictError(exceptions.APIException):
    """The requested transition is not allowed in the current state."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Conflicting state.'
    default_code = 'conflict'


class StoreError(exceptions.APIException):
    """Persistence failed; the real cause is only logged server-side."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = SERVER_ERROR_MESSAGE
    default_code = 'server_error'


def _first_message(data) -> str:
    """Pick a readable message out of a DRF error payload."""
    if isinstance(data, dict):
        if 'detail' in data:
            return _first_message(data['detail'])
        for field, value in data.items():
            message = _first_message(value)
            if field == 'non_field_errors':
                return message
            return f"{field}: {message}"
        return ''
    if isinstance(data, (list, tuple)):
        return _first_message(data[0]) if data else ''
    return str(data)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    request = context.get('request')
    if resp is None:
        logger.exception('Unhandled error on %s', getattr(request, 'path', '?'), exc_info=exc)
        return Response({'success': False, 'message': SERVER_ERROR_MESSAGE},
                        status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if resp.status_code >= 500:
        logger.error('Request failed with %s: %s', resp.status_code, exc)

    payload = {'success': False, 'message': _first_message(resp.data)}
    if isinstance(exc, exceptions.ValidationError) and isinstance(resp.data, dict):
        payload['errors'] = resp.data
    resp.data = payload
    return resp
