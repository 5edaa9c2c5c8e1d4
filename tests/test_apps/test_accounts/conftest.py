"""Shared fixtures for accounts app tests."""

import pytest
from django.contrib.auth import get_user_model

from server.apps.files.repositories import reset_repositories

User = get_user_model()


@pytest.fixture(autouse=True)
def _fresh_repositories():
    """Drop repository instances so in-memory data never leaks."""
    reset_repositories()
    yield
    reset_repositories()


@pytest.fixture
def user(db):
    """Create test user with a known password.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        username='alice',
        password='Str0ng-passw0rd!',
        full_name='Alice Example',
    )
