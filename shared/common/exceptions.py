# shared/common/exceptions.py
"""
Error envelope and DRF exception handler
"""

import logging
import traceback
from typing import Any, Optional
from rest_framework import status
from rest_framework.views import exception_handler
from rest_framework.response import Response
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from django.conf import settings

logger = logging.getLogger(__name__)


# =============================================================================
# ERROR RESPONSES
# =============================================================================

def error_response(
    status_code: int,
    error_code: str,
    message: str,
    request=None,
    **extra: Any
) -> Response:
    """
    Build a response in the common error envelope.

    Extra keyword arguments are merged into the ``error`` object, so callers
    can attach machine-readable payloads (conflict reports, offending ids).
    """
    error = {
        'code': error_code,
        'message': message,
        'request_id': getattr(request, 'request_id', None) if request else None,
    }
    error.update(extra)
    return Response({'success': False, 'error': error}, status=status_code)


# =============================================================================
# EXCEPTION HANDLER
# =============================================================================

def custom_exception_handler(exc, context) -> Optional[Response]:
    """
    Custom exception handler for DRF.
    Provides consistent error response format across all services.
    """

    # Get the request ID for tracing
    request = context.get('request')
    request_id = getattr(request, 'request_id', None) if request else None

    # Call DRF's default exception handler first
    response = exception_handler(exc, context)

    # If DRF handled it, format the response
    if response is not None:
        return format_error_response(exc, response, request_id)

    # Handle Django ValidationError
    if isinstance(exc, DjangoValidationError):
        errors = exc.message_dict if hasattr(exc, 'message_dict') else {'detail': exc.messages}
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            'VALIDATION_ERROR',
            'Validation error',
            request=request,
            details=errors,
        )

    # Handle Http404
    if isinstance(exc, Http404):
        return error_response(
            status.HTTP_404_NOT_FOUND,
            'NOT_FOUND',
            str(exc) or 'Resource not found',
            request=request,
        )

    # Log unexpected exceptions
    logger.exception(
        f"Unhandled exception: {exc}",
        extra={
            'request_id': request_id,
            'exception_type': type(exc).__name__,
        }
    )

    # Return generic error in production, detailed in debug
    if settings.DEBUG:
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            'INTERNAL_ERROR',
            str(exc),
            request=request,
            type=type(exc).__name__,
            traceback=traceback.format_exc().split('\n'),
        )

    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        'INTERNAL_ERROR',
        'An unexpected error occurred. Please try again later.',
        request=request,
    )


def format_error_response(exc, response: Response, request_id: str = None) -> Response:
    """Format error response in consistent structure"""

    error_code = getattr(exc, 'error_code', None) or _default_error_code(response.status_code)

    error_data = {
        'success': False,
        'error': {
            'code': error_code,
            'message': get_error_message(exc, response),
            'request_id': request_id,
        }
    }

    # Field-level validation errors from DRF
    if isinstance(response.data, dict) and 'detail' not in response.data:
        error_data['error']['details'] = response.data

    response.data = error_data
    return response


def get_error_message(exc, response: Response) -> str:
    """Extract error message from exception or response"""

    if hasattr(exc, 'detail'):
        if isinstance(exc.detail, str):
            return exc.detail
        if isinstance(exc.detail, list) and exc.detail:
            return str(exc.detail[0])
        if isinstance(exc.detail, dict):
            return exc.detail.get('detail', 'Validation error')

    if isinstance(response.data, dict):
        return response.data.get('detail', str(response.data))

    return str(response.data)


def _default_error_code(status_code: int) -> str:
    return {
        400: 'VALIDATION_ERROR',
        401: 'UNAUTHORIZED',
        403: 'FORBIDDEN',
        404: 'NOT_FOUND',
        405: 'METHOD_NOT_ALLOWED',
        409: 'CONFLICT',
    }.get(status_code, 'ERROR')
