"""View decorators for the JSON API."""

from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from typing import Any

from django.http import HttpRequest, HttpResponse

from server.apps.files.http import error_response

_View = Callable[..., HttpResponse]


def auth_required(view_func: _View) -> _View:
    """Answer 401 instead of redirecting anonymous API requests."""

    @wraps(view_func)
    def wrapper(
        request: HttpRequest,
        *args: Any,
        **kwargs: Any,
    ) -> HttpResponse:
        if not request.user.is_authenticated:
            return error_response(
                'Authentication required',
                HTTPStatus.UNAUTHORIZED,
            )
        return view_func(request, *args, **kwargs)

    return wrapper
