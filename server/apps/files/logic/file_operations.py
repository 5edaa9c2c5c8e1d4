"""Business logic for file operations."""

import logging
from collections.abc import Iterable
from typing import IO, TYPE_CHECKING, Any, BinaryIO

from django.conf import settings
from django.core.files.base import File as DjangoFile
from django.core.files.storage import default_storage

from server.apps.files.exceptions import (
    AccessDeniedError,
    BadRequestError,
    FileTooLargeError,
    InvalidFolderError,
    NotFoundError,
    NotPreviewableError,
    QuotaExceededError,
)
from server.apps.files.infrastructure.metadata import (
    build_storage_path,
    calculate_checksum,
    detect_mime_type,
    extract_filename,
    get_file_extension,
    get_file_size,
    is_previewable,
    validate_storage_path,
)
from server.apps.files.logic.quota_operations import check_quota
from server.apps.files.repositories import get_repository
from server.apps.files.repositories.records import (
    ANY,
    FileRecord,
    FolderFilter,
    NewFile,
)

if TYPE_CHECKING:
    from server.apps.files.infrastructure.storage import FileStorage

# User type for Django's dynamic user model
_User = Any

logger = logging.getLogger(__name__)


def _get_storage() -> 'FileStorage':
    """Get the configured default storage backend.

    Returns:
        FileStorage instance with proper S3 configuration.
    """
    return default_storage  # type: ignore[return-value]


def upload_file(
    user: _User,
    file_obj: BinaryIO | DjangoFile,
    folder_id: int | None = None,
) -> FileRecord:
    """Upload file to storage and register it for the user.

    Transaction safety: Upload to storage first, then create the record.
    If the record cannot be created, the uploaded blob is deleted from
    storage (rollback).

    Args:
        user: Owner of the file.
        file_obj: Uploaded file, its ``name`` is kept as the file name.
        folder_id: Target folder, None for the root directory.

    Returns:
        Created file record.

    Raises:
        FileTooLargeError: If file is bigger than the upload limit.
        InvalidFolderError: If folder is missing or not owned by user.
        QuotaExceededError: If upload would exceed user's quota.
    """
    repository = get_repository()
    original_name = getattr(file_obj, 'name', None) or ''
    filename = extract_filename(original_name) or 'file'
    file_size = get_file_size(file_obj)

    max_bytes = settings.FILES_MAX_UPLOAD_BYTES
    if file_size > max_bytes:
        logger.warning(
            'Upload rejected for user %s: %d bytes over %d limit',
            user.username,
            file_size,
            max_bytes,
        )
        raise FileTooLargeError(file_size, max_bytes)

    if folder_id is not None:
        folder = repository.get_folder_by_id(folder_id)
        if folder is None or folder.user_id != user.id:
            raise InvalidFolderError

    check_quota(user.id, file_size)

    storage_path = build_storage_path(user.id, filename)
    validate_storage_path(user.id, storage_path)

    logger.info('Calculating metadata for file: %s', storage_path)
    checksum = calculate_checksum(file_obj)
    mime_type = detect_mime_type(file_obj, filename)

    # Step 1: Upload to storage first
    storage = _get_storage()
    saved_name = storage.save(storage_path, file_obj)

    # Step 2: Register the file, charging the owner's quota. The repository
    # re-checks the quota under a lock while charging it.
    try:
        file_record = repository.create_file(NewFile(
            name=filename,
            file_type=get_file_extension(filename),
            mime_type=mime_type,
            size_bytes=file_size,
            path=saved_name,
            user_id=user.id,
            folder_id=folder_id,
            checksum_sha256=checksum,
        ))
    except QuotaExceededError:
        logger.warning(
            'Quota filled up during upload, rolling back: %s',
            saved_name,
        )
        storage.rollback_upload(saved_name)
        raise
    except Exception:
        # Rollback: Delete file from storage since the record failed
        logger.exception(
            'Creating file record failed, rolling back storage upload: %s',
            saved_name,
        )
        storage.rollback_upload(saved_name)
        raise

    logger.info(
        'File uploaded: %s -> %s (ID: %d, %d bytes)',
        filename,
        saved_name,
        file_record.id,
        file_size,
    )
    return file_record


def get_file(user: _User, file_id: int) -> FileRecord:
    """Get a file the user may read: their own or a public one.

    Raises:
        NotFoundError: If file doesn't exist.
        AccessDeniedError: If file is private and owned by someone else.
    """
    file_record = get_repository().get_file_by_id(file_id)
    if file_record is None:
        raise NotFoundError('File not found')
    if file_record.user_id != user.id and not file_record.is_public:
        logger.warning(
            'User %s denied access to file %d',
            user.username,
            file_id,
        )
        raise AccessDeniedError
    return file_record


def open_file(user: _User, file_id: int) -> tuple[FileRecord, IO[bytes]]:
    """Open the blob of a readable file.

    Returns:
        Tuple of the file record and an open binary file handle.

    Raises:
        NotFoundError: If the record or the blob doesn't exist.
        AccessDeniedError: If file is private and owned by someone else.
    """
    file_record = get_file(user, file_id)
    storage = _get_storage()

    if not storage.exists(file_record.path):
        logger.error(
            'Blob missing for file %d: %s',
            file_record.id,
            file_record.path,
        )
        raise NotFoundError('File not found on server')

    return file_record, storage.open(file_record.path, 'rb')


def open_preview(user: _User, file_id: int) -> tuple[FileRecord, IO[bytes]]:
    """Open a readable file for inline display.

    Raises:
        NotPreviewableError: If browsers cannot render the file type.
    """
    file_record = get_file(user, file_id)
    if not is_previewable(file_record.mime_type):
        raise NotPreviewableError(
            f'Preview is not available for {file_record.mime_type}',
        )
    return open_file(user, file_id)


def list_files(
    user: _User,
    folder_id: FolderFilter = ANY,
) -> list[FileRecord]:
    """List the user's files.

    Args:
        user: Owner of files.
        folder_id: ANY for every file, None for files in the root
            directory, or an id for the files inside that folder.

    Returns:
        Files, newest first.
    """
    return get_repository().get_files_by_user_id(user.id, folder_id)


def search_files(user: _User, query: str) -> list[FileRecord]:
    """Search the user's files by name or file type.

    Raises:
        BadRequestError: If query is empty.
    """
    cleaned_query = query.strip()
    if not cleaned_query:
        raise BadRequestError('Search query required')

    logger.debug('Searching files of %s for %r', user.username, cleaned_query)
    return get_repository().search_files(user.id, cleaned_query)


def delete_file(user: _User, file_id: int) -> None:
    """Delete a file record and its blob.

    Transaction safety: Delete the record first (releasing quota), then
    the blob. A blob that fails to delete is logged as orphaned.

    Raises:
        NotFoundError: If file doesn't exist.
        AccessDeniedError: If file is owned by another user.
    """
    repository = get_repository()
    file_record = repository.get_file_by_id(file_id)
    if file_record is None:
        raise NotFoundError('File not found')
    if file_record.user_id != user.id:
        raise AccessDeniedError

    logger.info(
        'Deleting file: ID=%d, path=%s',
        file_id,
        file_record.path,
    )
    repository.delete_file(file_id)
    release_blobs([file_record.path])


def release_blobs(paths: Iterable[str]) -> int:
    """Delete blobs whose records were removed.

    Best effort: failures are logged by the storage backend and the
    orphaned blobs are left behind.

    Returns:
        Number of blobs deleted.
    """
    storage = _get_storage()
    return sum(1 for path in paths if storage.release(path))
