"""Tests for file operations business logic."""

from io import BytesIO
from unittest import mock

import pytest
from django.core.files.base import ContentFile

from server.apps.files.exceptions import (
    AccessDeniedError,
    BadRequestError,
    FileTooLargeError,
    InvalidFolderError,
    NotFoundError,
    NotPreviewableError,
    QuotaExceededError,
)
from server.apps.files.logic.file_operations import (
    delete_file,
    get_file,
    list_files,
    open_file,
    open_preview,
    search_files,
    upload_file,
)
from server.apps.files.logic.folder_operations import create_folder
from server.apps.files.logic.quota_operations import get_storage_summary
from server.apps.files.models import File, UserQuota
from server.apps.files.repositories import get_repository
from server.apps.files.repositories.records import ANY


def test_upload_file_success(repository_backend, user, mock_s3, bucket):
    """Test successful file upload (storage + record + quota)."""
    content = ContentFile(b'test file content', name='test.txt')

    file_record = upload_file(user, content)

    assert file_record.id is not None
    assert file_record.user_id == user.id
    assert file_record.name == 'test.txt'
    assert file_record.file_type == 'txt'
    assert file_record.folder_id is None
    assert file_record.size_bytes == len(b'test file content')
    assert file_record.mime_type == 'text/plain'
    assert len(file_record.checksum_sha256) == 64
    assert file_record.path.startswith(f'{user.id}/')
    assert file_record.path.endswith('-test.txt')

    assert [obj.key for obj in bucket.objects.all()] == [file_record.path]
    assert get_storage_summary(user.id)['used'] == file_record.size_bytes


def test_upload_file_into_folder(repository_backend, user, mock_s3):
    """Test upload lands in the given folder."""
    folder = create_folder(user, 'Docs')

    file_record = upload_file(
        user,
        ContentFile(b'data', name='doc.pdf'),
        folder.id,
    )

    assert file_record.folder_id == folder.id
    assert file_record.mime_type == 'application/pdf'
    assert list_files(user, folder.id) == [file_record]


def test_upload_plain_stream(repository_backend, user, mock_s3):
    """Test uploads from file objects without a Django wrapper."""
    stream = BytesIO(b'raw bytes')
    stream.name = 'raw.bin'

    file_record = upload_file(user, stream)

    assert file_record.name == 'raw.bin'
    assert file_record.size_bytes == 9


def test_upload_same_name_twice(repository_backend, user, mock_s3):
    """Test identical names get separate blobs."""
    first = upload_file(user, ContentFile(b'one', name='same.txt'))
    second = upload_file(user, ContentFile(b'two', name='same.txt'))

    assert first.path != second.path
    assert get_storage_summary(user.id)['used'] == 6


def test_upload_into_foreign_folder(
    repository_backend,
    user,
    other_user,
    mock_s3,
    bucket,
):
    """Test users cannot upload into folders of others."""
    foreign = create_folder(other_user, 'Private')

    with pytest.raises(InvalidFolderError, match='Invalid folder'):
        upload_file(user, ContentFile(b'data', name='x.txt'), foreign.id)

    assert list(bucket.objects.all()) == []


def test_upload_into_missing_folder(repository_backend, user, mock_s3):
    """Test target folder must exist."""
    with pytest.raises(InvalidFolderError):
        upload_file(user, ContentFile(b'data', name='x.txt'), 99999)


def test_upload_file_quota_exceeded(user, mock_s3, bucket):
    """Test upload fails when quota would be exceeded."""
    UserQuota.objects.create(user=user, quota_bytes=10, used_bytes=5)

    with pytest.raises(QuotaExceededError):
        upload_file(user, ContentFile(b'too large', name='big.txt'))

    # Nothing stored
    assert File.objects.count() == 0
    assert list(bucket.objects.all()) == []


def test_upload_rolls_back_when_quota_fills_meanwhile(user, mock_s3, bucket):
    """Test a concurrent upload that used the space removes the new blob."""
    UserQuota.objects.create(user=user, quota_bytes=10, used_bytes=8)

    # Earlier check passed before another upload took the space
    with mock.patch(
        'server.apps.files.logic.file_operations.check_quota',
    ):
        with pytest.raises(QuotaExceededError):
            upload_file(user, ContentFile(b'data', name='x.txt'))

    assert File.objects.count() == 0
    assert list(bucket.objects.all()) == []
    assert UserQuota.objects.get(user=user).used_bytes == 8


def test_upload_file_too_large(user, mock_s3, settings):
    """Test single uploads are limited in size."""
    settings.FILES_MAX_UPLOAD_BYTES = 4

    with pytest.raises(FileTooLargeError) as exc_info:
        upload_file(user, ContentFile(b'12345', name='big.txt'))

    assert exc_info.value.size_bytes == 5
    assert exc_info.value.max_bytes == 4


def test_upload_rolls_back_blob_when_record_fails(user, mock_s3, bucket):
    """Test blob is removed if the record cannot be created."""
    with mock.patch.object(
        type(get_repository()),
        'create_file',
        side_effect=RuntimeError('database down'),
    ):
        with pytest.raises(RuntimeError, match='database down'):
            upload_file(user, ContentFile(b'data', name='x.txt'))

    assert list(bucket.objects.all()) == []
    assert get_storage_summary(user.id)['used'] == 0


def test_get_file_of_owner(repository_backend, user, mock_s3):
    """Test owners read their files."""
    uploaded = upload_file(user, ContentFile(b'data', name='x.txt'))

    assert get_file(user, uploaded.id) == uploaded


def test_get_file_not_found(repository_backend, user):
    """Test unknown file."""
    with pytest.raises(NotFoundError, match='File not found'):
        get_file(user, 99999)


def test_get_private_file_of_other_user(
    repository_backend,
    user,
    other_user,
    mock_s3,
):
    """Test private files are hidden from other users."""
    foreign = upload_file(other_user, ContentFile(b'data', name='x.txt'))

    with pytest.raises(AccessDeniedError):
        get_file(user, foreign.id)


def test_get_public_file_of_other_user(user, other_user, mock_s3):
    """Test public files are readable by everyone."""
    foreign = upload_file(other_user, ContentFile(b'data', name='x.txt'))
    File.objects.filter(id=foreign.id).update(is_public=True)

    assert get_file(user, foreign.id).is_public is True


def test_open_file(repository_backend, user, mock_s3):
    """Test reading the stored blob back."""
    uploaded = upload_file(user, ContentFile(b'payload', name='x.txt'))

    file_record, handle = open_file(user, uploaded.id)

    with handle:
        assert handle.read() == b'payload'
    assert file_record == uploaded


def test_open_file_missing_blob(repository_backend, user, mock_s3, bucket):
    """Test records whose blob vanished report a missing file."""
    uploaded = upload_file(user, ContentFile(b'payload', name='x.txt'))
    bucket.Object(uploaded.path).delete()

    with pytest.raises(NotFoundError, match='File not found on server'):
        open_file(user, uploaded.id)


def test_open_preview(repository_backend, user, mock_s3):
    """Test previewable files open for inline display."""
    uploaded = upload_file(user, ContentFile(b'hello', name='hello.txt'))

    file_record, handle = open_preview(user, uploaded.id)

    with handle:
        assert handle.read() == b'hello'
    assert file_record.mime_type == 'text/plain'


def test_open_preview_not_previewable(repository_backend, user, mock_s3):
    """Test archives cannot be previewed."""
    uploaded = upload_file(user, ContentFile(b'PK', name='archive.zip'))

    with pytest.raises(NotPreviewableError):
        open_preview(user, uploaded.id)


def test_list_files(repository_backend, user, other_user, mock_s3):
    """Test listing every, root and folder files."""
    folder = create_folder(user, 'Docs')
    in_root = upload_file(user, ContentFile(b'1', name='root.txt'))
    in_folder = upload_file(
        user,
        ContentFile(b'2', name='inner.txt'),
        folder.id,
    )
    upload_file(other_user, ContentFile(b'3', name='foreign.txt'))

    assert list_files(user, ANY) == [in_folder, in_root]
    assert list_files(user, None) == [in_root]
    assert list_files(user, folder.id) == [in_folder]


def test_search_files(repository_backend, user, mock_s3):
    """Test search by name fragment and by file type."""
    report = upload_file(user, ContentFile(b'1', name='Annual-Report.pdf'))
    photo = upload_file(user, ContentFile(b'2', name='beach.png'))

    assert search_files(user, 'report') == [report]
    assert search_files(user, ' PNG ') == [photo]


@pytest.mark.parametrize('query', ['', '   '])
def test_search_files_requires_query(repository_backend, user, query):
    """Test empty queries are rejected."""
    with pytest.raises(BadRequestError, match='Search query required'):
        search_files(user, query)


def test_delete_file_success(repository_backend, user, mock_s3, bucket):
    """Test deletion removes record, blob and quota usage."""
    uploaded = upload_file(user, ContentFile(b'12345', name='x.txt'))

    delete_file(user, uploaded.id)

    assert list_files(user) == []
    assert list(bucket.objects.all()) == []
    assert get_storage_summary(user.id)['used'] == 0


def test_delete_file_not_found(repository_backend, user):
    """Test deleting non-existent file."""
    with pytest.raises(NotFoundError):
        delete_file(user, 99999)


def test_delete_public_file_of_other_user(user, other_user, mock_s3):
    """Test public files can still only be deleted by their owner."""
    foreign = upload_file(other_user, ContentFile(b'data', name='x.txt'))
    File.objects.filter(id=foreign.id).update(is_public=True)

    with pytest.raises(AccessDeniedError):
        delete_file(user, foreign.id)

    assert File.objects.filter(id=foreign.id).exists()


def test_delete_file_with_missing_blob(
    repository_backend,
    user,
    mock_s3,
    bucket,
):
    """Test records are deleted even when the blob is already gone."""
    uploaded = upload_file(user, ContentFile(b'12345', name='x.txt'))
    bucket.Object(uploaded.path).delete()

    delete_file(user, uploaded.id)

    assert list_files(user) == []
