"""Account endpoints of the JSON API."""

import logging
from http import HTTPStatus

from django.contrib.auth import authenticate, login, logout
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_POST

from server.apps.accounts.decorators import auth_required
from server.apps.accounts.forms import LoginForm, RegistrationForm
from server.apps.accounts.logic.account_operations import (
    register_user,
    serialize_user,
)
from server.apps.files.http import (
    error_response,
    form_error_message,
    json_body,
)

logger = logging.getLogger(__name__)


@require_POST
def register(request: HttpRequest) -> HttpResponse:
    """Create an account and start a session for it."""
    form = RegistrationForm(json_body(request))
    if not form.is_valid():
        return error_response(form_error_message(form), HTTPStatus.BAD_REQUEST)

    user = register_user(
        username=form.cleaned_data['username'],
        password=form.cleaned_data['password'],
        full_name=form.cleaned_data['full_name'],
    )
    login(request, user, backend='django.contrib.auth.backends.ModelBackend')
    return JsonResponse(serialize_user(user), status=HTTPStatus.CREATED)


@require_POST
def login_view(request: HttpRequest) -> HttpResponse:
    """Start a session from username and password."""
    form = LoginForm(json_body(request))
    if not form.is_valid():
        return error_response(form_error_message(form), HTTPStatus.BAD_REQUEST)

    user = authenticate(
        request,
        username=form.cleaned_data['username'],
        password=form.cleaned_data['password'],
    )
    if user is None:
        logger.warning(
            'Failed login attempt for user: %s',
            form.cleaned_data['username'],
        )
        return error_response(
            'Invalid username or password',
            HTTPStatus.UNAUTHORIZED,
        )

    login(request, user)
    logger.info('User logged in: %s', user.username)
    return JsonResponse(serialize_user(user))


@require_POST
def logout_view(request: HttpRequest) -> HttpResponse:
    """End the current session."""
    logout(request)
    return HttpResponse(status=HTTPStatus.OK)


@require_GET
@ensure_csrf_cookie
@auth_required
def current_user(request: HttpRequest) -> HttpResponse:
    """Return the logged in user; also hands out the CSRF cookie."""
    return JsonResponse(serialize_user(request.user))
