"""Business logic for registering and looking up users."""

import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction

from server.apps.files.repositories import get_repository

User = get_user_model()
logger = logging.getLogger(__name__)


def register_user(
    username: str,
    password: str,
    full_name: str = '',
) -> Any:
    """Create a user together with their storage account.

    Args:
        username: Unique login name.
        password: Raw password, stored hashed.
        full_name: Optional display name.

    Returns:
        Created user.

    Raises:
        ValidationError: If the username is already taken.
    """
    if User.objects.filter(username=username).exists():
        raise ValidationError('Username already exists')

    with transaction.atomic():
        user = User.objects.create_user(
            username=username,
            password=password,
            full_name=full_name,
        )
        account = get_repository().get_account(user.id)

    logger.info(
        'Registered user %s (ID: %d, quota: %d bytes)',
        username,
        user.id,
        account.limit_bytes,
    )
    return user


def get_user(user_id: int) -> Any | None:
    """Get user by id or None."""
    return User.objects.filter(id=user_id).first()


def get_user_by_username(username: str) -> Any | None:
    """Get user by username or None."""
    return User.objects.filter(username=username).first()


def serialize_user(user: Any) -> dict[str, Any]:
    return {
        'id': user.id,
        'username': user.username,
        'full_name': user.full_name,
        'created_at': user.date_joined.isoformat(),
    }
