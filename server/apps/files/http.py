"""Helpers shared by the JSON API views."""

import json
from http import HTTPStatus
from typing import Any

from django import forms
from django.core.exceptions import NON_FIELD_ERRORS
from django.http import HttpRequest, JsonResponse

from server.apps.files.exceptions import BadRequestError
from server.apps.files.repositories.records import ANY, FolderFilter

# Query value selecting the root directory
ROOT_FOLDER_PARAM = 'root'


def json_body(request: HttpRequest) -> dict[str, Any]:
    """Decode a JSON object request body.

    Raises:
        BadRequestError: If the body is not a JSON object.
    """
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError) as error:
        raise BadRequestError('Request body must be valid JSON') from error
    if not isinstance(payload, dict):
        raise BadRequestError('Request body must be a JSON object')
    return payload


def form_error_message(form: forms.Form) -> str:
    """Flatten form errors into one message.

    Example: 'name: This field is required.'
    """
    messages = []
    for field, errors in form.errors.items():
        prefix = '' if field == NON_FIELD_ERRORS else f'{field}: '
        messages.extend(f'{prefix}{error}' for error in errors)
    return '; '.join(messages)


def error_response(message: str, status: HTTPStatus) -> JsonResponse:
    """Build the JSON body every API error uses."""
    return JsonResponse({'message': message}, status=status)


def folder_filter_param(request: HttpRequest, name: str) -> FolderFilter:
    """Read a folder filter from the query string.

    A missing or empty value means every folder, ``root`` the root
    directory, and a number that folder.

    Raises:
        BadRequestError: If the value is neither a number nor ``root``.
    """
    raw_value = request.GET.get(name, '').strip()
    if not raw_value:
        return ANY
    if raw_value == ROOT_FOLDER_PARAM:
        return None
    try:
        return int(raw_value)
    except ValueError as error:
        raise BadRequestError(
            f'{name} must be a folder id or "root"',
        ) from error
