"""Shared fixtures for files app tests."""

import boto3
import pytest
from django.contrib.auth import get_user_model
from django.core.files.base import ContentFile
from moto import mock_aws

from server.apps.files.repositories import reset_repositories

User = get_user_model()

_MEMORY_REPOSITORY = 'server.apps.files.repositories.memory.MemoryRepository'
_DATABASE_REPOSITORY = (
    'server.apps.files.repositories.database.DatabaseRepository'
)


@pytest.fixture
def user(db):
    """Create test user.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        username='testuser',
        password='testpass123',
        email='test@example.com',
    )


@pytest.fixture
def other_user(db):
    """Create second test user for isolation tests.

    Returns:
        Second user instance.
    """
    return User.objects.create_user(
        username='otheruser',
        password='testpass123',
        email='other@example.com',
    )


@pytest.fixture
def mock_s3():
    """Mock S3 service with cloud-drive bucket.

    Yields:
        boto3 S3 resource with cloud-drive bucket created.
    """
    with mock_aws():
        # Create S3 resource
        conn = boto3.resource('s3', region_name='us-east-1')

        # Create bucket
        conn.create_bucket(Bucket='cloud-drive')

        yield conn


@pytest.fixture
def bucket(mock_s3):
    """Bucket holding uploaded blobs."""
    return mock_s3.Bucket('cloud-drive')


@pytest.fixture
def sample_file_content():
    """Sample file content for testing.

    Returns:
        ContentFile with test data.
    """
    return ContentFile(b'test file content', name='test.txt')


@pytest.fixture(autouse=True)
def _fresh_repositories():
    """Drop repository instances so in-memory data never leaks."""
    reset_repositories()
    yield
    reset_repositories()


@pytest.fixture(params=['memory', 'database'])
def repository_backend(request, settings, db):
    """Run the test against both repository implementations.

    Returns:
        Name of the active backend.
    """
    settings.FILES_REPOSITORY = {
        'memory': _MEMORY_REPOSITORY,
        'database': _DATABASE_REPOSITORY,
    }[request.param]
    return request.param


@pytest.fixture
def memory_backend(settings):
    """Switch the logic layer to the in-memory repository."""
    settings.FILES_REPOSITORY = _MEMORY_REPOSITORY


@pytest.fixture
def auth_client(client, user):
    """Test client with a session of ``user``.

    Returns:
        Logged in django test client.
    """
    client.force_login(user)
    return client
