"""Tests for account business logic."""

import pytest
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError

from server.apps.accounts.logic.account_operations import (
    get_user,
    get_user_by_username,
    register_user,
    serialize_user,
)
from server.apps.files.models import UserQuota

User = get_user_model()


@pytest.mark.django_db
def test_register_user_creates_quota():
    """Test new users get a storage account with the default limit."""
    user = register_user('bob', 'Str0ng-passw0rd!', full_name='Bob')

    assert user.check_password('Str0ng-passw0rd!')
    assert user.full_name == 'Bob'
    quota = UserQuota.objects.get(user=user)
    assert quota.quota_bytes == 10 * 1024 * 1024
    assert quota.used_bytes == 0


@pytest.mark.django_db
def test_register_user_duplicate_username(user):
    """Test usernames are unique."""
    with pytest.raises(ValidationError, match='Username already exists'):
        register_user('alice', 'Str0ng-passw0rd!')

    assert User.objects.filter(username='alice').count() == 1


@pytest.mark.django_db
def test_get_user(user):
    """Test lookups by id and by username."""
    assert get_user(user.id) == user
    assert get_user(99999) is None
    assert get_user_by_username('alice') == user
    assert get_user_by_username('nobody') is None


@pytest.mark.django_db
def test_serialize_user(user):
    """Test public representation never contains the password."""
    data = serialize_user(user)

    assert data == {
        'id': user.id,
        'username': 'alice',
        'full_name': 'Alice Example',
        'created_at': user.date_joined.isoformat(),
    }


@pytest.mark.django_db
def test_user_display_name(user):
    """Test full name falls back to username."""
    assert str(user) == 'alice'
    assert user.get_full_name() == 'Alice Example'

    user.full_name = ''
    assert user.get_full_name() == 'alice'
