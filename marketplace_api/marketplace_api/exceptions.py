"""
Domain errors shared by every app, and the DRF exception handler that renders
them (and everything else DRF raises) as ``{"success": false, "message", "errors"}``.
"""
import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler


logger = logging.getLogger(__name__)


class Unauthenticated(exceptions.NotAuthenticated):
    default_detail = "Authentication credentials were not provided or are invalid."


class Forbidden(exceptions.PermissionDenied):
    default_detail = "You are not allowed to perform this action."


class NotFound(exceptions.NotFound):
    default_detail = "Resource not found."


class InvalidInput(exceptions.ValidationError):
    default_detail = "Invalid input."


class Conflict(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "The request conflicts with the current state of the resource."
    default_code = 'conflict'


class InvalidState(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "The resource is not in a state that allows this action."
    default_code = 'invalid_state'


class Unexpected(exceptions.APIException):
    default_detail = "An unexpected error occurred."
    default_code = 'unexpected'


def error_message(detail):
    """Flatten a DRF ``detail`` (str, list or dict) into a single readable message."""
    if isinstance(detail, dict):
        if 'detail' in detail:
            return error_message(detail['detail'])
        for field, value in detail.items():
            message = error_message(value)
            if field == 'non_field_errors':
                return message
            return f"{field}: {message}"
        return ""
    if isinstance(detail, (list, tuple)):
        return error_message(detail[0]) if detail else ""
    return str(detail)


def envelope_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(f"Unhandled exception in {view.__class__.__name__ if view else 'unknown view'}: {exc}")
        return Response(
            {'success': False, 'message': Unexpected.default_detail},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    detail = getattr(exc, 'detail', response.data)
    payload = {
        'success': False,
        'message': error_message(detail),
    }
    if isinstance(detail, (dict, list)):
        payload['errors'] = response.data

    response.data = payload
    return response
