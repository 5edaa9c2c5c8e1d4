"""Tests for UserQuota model and how the storage layer maintains it."""

import pytest
from django.db import IntegrityError

from server.apps.accounts.logic.account_operations import register_user
from server.apps.files.models import DEFAULT_QUOTA_BYTES, UserQuota
from server.apps.files.repositories.database import DatabaseRepository


def test_model_default_matches_setting(settings):
    """Test the column default and the configured account limit agree."""
    assert DEFAULT_QUOTA_BYTES == 10 * 1024 * 1024
    assert settings.FILES_DEFAULT_QUOTA_BYTES == DEFAULT_QUOTA_BYTES


@pytest.mark.django_db
def test_account_limit_comes_from_settings(user, settings):
    """Test quotas created on demand use FILES_DEFAULT_QUOTA_BYTES."""
    settings.FILES_DEFAULT_QUOTA_BYTES = 2048

    account = DatabaseRepository().get_account(user.id)

    quota = UserQuota.objects.get(user=user)
    assert quota.quota_bytes == 2048
    assert account.limit_bytes == 2048


@pytest.mark.django_db
def test_existing_quota_is_kept(user, settings):
    """Test a stored limit wins over the configured default."""
    UserQuota.objects.create(user=user, quota_bytes=5000, used_bytes=1000)
    settings.FILES_DEFAULT_QUOTA_BYTES = 2048

    account = DatabaseRepository().get_account(user.id)

    assert (account.limit_bytes, account.used_bytes) == (5000, 1000)
    assert UserQuota.objects.filter(user=user).count() == 1


@pytest.mark.django_db
def test_registration_creates_quota(settings):
    """Test new accounts start with an empty quota row."""
    settings.FILES_DEFAULT_QUOTA_BYTES = 4096

    user = register_user('carol', 'Str0ng-passw0rd!')

    quota = UserQuota.objects.get(user=user)
    assert (quota.quota_bytes, quota.used_bytes) == (4096, 0)


@pytest.mark.django_db
def test_used_bytes_non_negative_constraint(user):
    """Test the database refuses negative usage written directly."""
    quota = UserQuota(user=user, quota_bytes=1000, used_bytes=-100)

    with pytest.raises(IntegrityError):
        quota.save()


@pytest.mark.django_db
def test_release_larger_than_usage_is_clamped(user):
    """Test freeing more than is used stops at zero instead of failing."""
    UserQuota.objects.create(user=user, quota_bytes=1000, used_bytes=300)

    account = DatabaseRepository().update_user_storage(user.id, -500)

    assert account.used_bytes == 0
    assert UserQuota.objects.get(user=user).used_bytes == 0


@pytest.mark.django_db
def test_over_quota_usage(user):
    """Test a user over the limit has no space, even for empty files."""
    quota = UserQuota.objects.create(
        user=user,
        quota_bytes=1000,
        used_bytes=1200,
    )
    account = DatabaseRepository().get_account(user.id)

    assert quota.available_bytes() == 0
    assert account.remaining_bytes == 0
    assert quota.has_space_for(0) is False
    assert account.has_space_for(0) is False


@pytest.mark.django_db
def test_exact_fit_is_allowed(user):
    """Test an upload filling the quota exactly fits."""
    quota = UserQuota.objects.create(
        user=user,
        quota_bytes=1000,
        used_bytes=400,
    )

    assert quota.has_space_for(600) is True
    assert quota.has_space_for(601) is False


@pytest.mark.django_db
def test_quota_removed_with_user(user):
    """Test quota rows go with their user."""
    DatabaseRepository().get_account(user.id)

    user.delete()

    assert not UserQuota.objects.exists()
