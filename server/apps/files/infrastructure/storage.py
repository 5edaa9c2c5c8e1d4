"""Custom storage backend for S3-compatible storage."""

import logging
from typing import Any, final, override

from storages.backends.s3 import S3Storage

logger = logging.getLogger(__name__)


@final
class FileStorage(S3Storage):
    """S3 storage backend for uploaded blobs.

    Extends django-storages S3Storage with:
    - Rollback of uploads whose database record could not be created
    - Best-effort release of blobs whose record is gone
    - Logging of every write
    """

    @override
    def save(  # noqa: WPS211
        self,
        name: str,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save file to S3 with error handling and logging.

        Args:
            name: Storage path for the file.
            content: File content (file-like object).
            max_length: Optional maximum length for the filename.

        Returns:
            Actual storage path used (may differ from name if conflicts).

        Raises:
            Exception: If S3 upload fails.
        """
        try:
            logger.info('Uploading file to storage: %s', name)
            saved_name = super().save(name, content, max_length)
        except Exception:
            logger.exception('Failed to upload file to storage: %s', name)
            raise
        logger.info('Successfully uploaded file: %s', saved_name)
        return saved_name

    @override
    def delete(self, name: str) -> None:
        """Delete file from S3 with error handling and logging.

        Args:
            name: Storage path of file to delete.

        Raises:
            Exception: If S3 delete fails.
        """
        try:
            logger.info('Deleting file from storage: %s', name)
            super().delete(name)
        except Exception:
            logger.exception('Failed to delete file from storage: %s', name)
            raise
        logger.info('Successfully deleted file: %s', name)

    def rollback_upload(self, name: str) -> None:
        """Delete uploaded file after its database record failed.

        Best-effort: the caller re-raises the original error, so a failed
        delete is only logged and leaves an orphaned blob behind.

        Args:
            name: Storage path of file to delete.
        """
        try:
            logger.warning('Rolling back upload, deleting file: %s', name)
            self.delete(name)
        except Exception:
            logger.exception(
                'Failed to rollback upload, orphaned file: %s',
                name,
            )

    def release(self, name: str) -> bool:
        """Delete the blob of a file record that no longer exists.

        The record is already gone when this runs, so failures are logged
        instead of raised.

        Args:
            name: Storage path of the blob.

        Returns:
            True if the blob was deleted, False otherwise.
        """
        try:
            if not self.exists(name):
                logger.warning(
                    'File not found in storage (already deleted?): %s',
                    name,
                )
                return False
            self.delete(name)
        except Exception:
            logger.exception(
                'Failed to delete file from storage (orphaned): %s',
                name,
            )
            return False
        return True
