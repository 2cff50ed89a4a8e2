# shared/common/middleware.py
"""
Custom Middleware Classes
"""

import uuid
import time
import logging
from typing import Callable
from django.http import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)

HEALTH_PATHS = ('/health/', '/health/ready/', '/health/live/')


class RequestIDMiddleware:
    """
    Middleware that adds a unique request ID to each request.
    The ID is used for request tracing across services.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        # Get request ID from header or generate new one
        request_id = request.headers.get('X-Request-ID')
        if not request_id:
            request_id = str(uuid.uuid4())

        request.request_id = request_id

        response = self.get_response(request)
        response['X-Request-ID'] = request_id

        return response


class LoggingMiddleware:
    """
    Middleware that logs request/response information.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        if request.path in HEALTH_PATHS:
            return self.get_response(request)

        start_time = time.time()

        logger.info(
            f"Request started: {request.method} {request.path}",
            extra={
                'request_id': getattr(request, 'request_id', None),
                'method': request.method,
                'path': request.path,
                'ip_address': self.get_client_ip(request),
            }
        )

        response = self.get_response(request)

        duration = time.time() - start_time

        # DRF authenticates inside the view, so the principal is only known now
        log_method = logger.warning if response.status_code >= 400 else logger.info
        log_method(
            f"Request completed: {request.method} {request.path} - {response.status_code}",
            extra={
                'request_id': getattr(request, 'request_id', None),
                'method': request.method,
                'path': request.path,
                'status_code': response.status_code,
                'duration_ms': round(duration * 1000, 2),
                'user_id': str(getattr(getattr(request, 'user', None), 'id', None)),
            }
        )

        response['X-Response-Time'] = f"{duration * 1000:.2f}ms"

        return response

    def get_client_ip(self, request: HttpRequest) -> str:
        """Extract client IP from request"""
        x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
        if x_forwarded_for:
            return x_forwarded_for.split(',')[0].strip()
        return request.META.get('REMOTE_ADDR', '')
