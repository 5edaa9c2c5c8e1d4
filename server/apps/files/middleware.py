"""Middleware rendering errors of the JSON API."""

import logging
from collections.abc import Callable
from http import HTTPStatus
from typing import final

from django.core.exceptions import ValidationError
from django.http import HttpRequest, HttpResponse

from server.apps.files.exceptions import FilesError
from server.apps.files.http import error_response

logger = logging.getLogger(__name__)

_API_PREFIX = '/api/'


@final
class ApiErrorMiddleware:
    """Turn exceptions raised by API views into JSON error responses.

    FilesError subclasses answer with their own status and message,
    validation errors with 400. Anything else is logged and answered
    with a generic 500 so internals never leak to clients.
    """

    def __init__(
        self,
        get_response: Callable[[HttpRequest], HttpResponse],
    ) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        return self.get_response(request)

    def process_exception(
        self,
        request: HttpRequest,
        exception: Exception,
    ) -> HttpResponse | None:
        """Render the exception when it comes from an API view."""
        if not request.path.startswith(_API_PREFIX):
            return None

        if isinstance(exception, FilesError):
            logger.info(
                '%s %s -> %d: %s',
                request.method,
                request.path,
                exception.status,
                exception.message,
            )
            return error_response(exception.message, exception.status)

        if isinstance(exception, ValidationError):
            return error_response(
                '; '.join(exception.messages),
                HTTPStatus.BAD_REQUEST,
            )

        logger.exception(
            'Unhandled error on %s %s',
            request.method,
            request.path,
        )
        return error_response(
            'Internal server error',
            HTTPStatus.INTERNAL_SERVER_ERROR,
        )
