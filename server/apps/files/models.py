"""Database models for files app."""

from typing import Final, final, override

from django.conf import settings
from django.db import models

# Constants for field max lengths
_NAME_MAX_LENGTH: Final = 255
_FILE_TYPE_MAX_LENGTH: Final = 32
_MIME_TYPE_MAX_LENGTH: Final = 255
_PATH_MAX_LENGTH: Final = 1024
_CHECKSUM_MAX_LENGTH: Final = 64  # SHA256 hex length

# Default quota: 10 MiB in bytes
DEFAULT_QUOTA_BYTES: Final = 10 * 1024 * 1024


@final
class Folder(models.Model):
    """Folder owned by a user.

    Folders nest through ``parent``; a folder without a parent sits in
    the user's root directory.
    """

    name = models.CharField(max_length=_NAME_MAX_LENGTH)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='folders',
        db_index=True,
    )

    parent = models.ForeignKey(
        'self',
        on_delete=models.CASCADE,
        related_name='children',
        null=True,
        blank=True,
        help_text='Containing folder, empty for the root directory',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Folder'  # type: ignore[mutable-override]
        verbose_name_plural = 'Folders'  # type: ignore[mutable-override]
        ordering = ['-created_at', '-id']

        indexes = [
            models.Index(
                fields=['user', 'parent'],
                name='folders_user_parent_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user.username}:{self.name}'


@final
class File(models.Model):
    """File stored in S3-compatible storage.

    The blob lives under ``file.name`` in storage, following the pattern
    {user_id}/{timestamp}-{random}-{filename}. The place of the file in
    the user's folder tree is the ``folder`` relation, not the blob key.
    """

    name = models.CharField(
        max_length=_NAME_MAX_LENGTH,
        help_text='Original filename as uploaded',
    )

    file_type = models.CharField(
        max_length=_FILE_TYPE_MAX_LENGTH,
        blank=True,
        default='',
        help_text='Lowercase extension without dot',
    )

    mime_type = models.CharField(max_length=_MIME_TYPE_MAX_LENGTH)

    size_bytes = models.BigIntegerField(help_text='File size in bytes')

    # upload_to='' means we control the full path
    file = models.FileField(
        upload_to='',
        max_length=_PATH_MAX_LENGTH,
        unique=True,
        help_text='Path in storage: {user_id}/{timestamp}-{random}-{name}',
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='files',
        db_index=True,
    )

    # Folders holding files are removed through the repository,
    # which releases quota and blobs first
    folder = models.ForeignKey(
        Folder,
        on_delete=models.RESTRICT,
        related_name='files',
        null=True,
        blank=True,
    )

    is_public = models.BooleanField(default=False)

    checksum_sha256 = models.CharField(
        max_length=_CHECKSUM_MAX_LENGTH,
        blank=True,
        default='',
        help_text='SHA256 hash for integrity verification',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'File'  # type: ignore[mutable-override]
        verbose_name_plural = 'Files'  # type: ignore[mutable-override]
        ordering = ['-created_at', '-id']

        indexes = [
            # Optimize directory listing queries
            models.Index(
                fields=['user', 'folder'],
                name='files_user_folder_idx',
            ),
            # Optimize recent files queries
            models.Index(
                fields=['user', '-created_at'],
                name='files_user_recent_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user.username}:{self.name}'


@final
class UserQuota(models.Model):
    """Storage quota for a user.

    Tracks user's storage limit and current usage. Usage is the sum of
    the sizes of every file the user owns.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='quota',
        primary_key=True,
    )

    quota_bytes = models.BigIntegerField(
        default=DEFAULT_QUOTA_BYTES,
        help_text='Storage quota limit in bytes',
    )

    used_bytes = models.BigIntegerField(
        default=0,
        help_text='Currently used storage in bytes',
    )

    class Meta:
        """Model metadata."""

        verbose_name = 'User Quota'  # type: ignore[mutable-override]
        verbose_name_plural = 'User Quotas'  # type: ignore[mutable-override]

        constraints = [
            models.CheckConstraint(
                condition=models.Q(quota_bytes__gte=0),
                name='quota_bytes_non_negative',
            ),
            models.CheckConstraint(
                condition=models.Q(used_bytes__gte=0),
                name='used_bytes_non_negative',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user.username}: {self.used_bytes}/{self.quota_bytes}'

    def has_space_for(self, size_bytes: int) -> bool:
        """Check if there's enough space for the given size.

        Args:
            size_bytes: Size to check in bytes.

        Returns:
            True if there's enough space, False otherwise.
        """
        return self.used_bytes + size_bytes <= self.quota_bytes

    def available_bytes(self) -> int:
        """Get available storage space.

        Returns:
            Available bytes (never negative).
        """
        available = self.quota_bytes - self.used_bytes
        return max(0, available)
