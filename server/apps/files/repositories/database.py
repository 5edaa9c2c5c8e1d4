"""Database storage repository built on the Django ORM."""

import logging
from collections import defaultdict
from typing import Final, final

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import F, Q  # noqa: WPS347

from server.apps.files.exceptions import NotFoundError, QuotaExceededError
from server.apps.files.models import File, Folder, UserQuota
from server.apps.files.repositories.records import (
    ANY,
    FileRecord,
    FolderFilter,
    FolderRecord,
    NewFile,
    StorageAccount,
)

User = get_user_model()
logger = logging.getLogger(__name__)

# Field name constant to avoid string literal over-use
_USED_BYTES_FIELD: Final = 'used_bytes'  # noqa: WPS226


def _account_record(quota: UserQuota) -> StorageAccount:
    return StorageAccount(
        user_id=quota.user_id,
        used_bytes=quota.used_bytes,
        limit_bytes=quota.quota_bytes,
    )


def _folder_record(folder: Folder) -> FolderRecord:
    return FolderRecord(
        id=folder.id,
        name=folder.name,
        user_id=folder.user_id,
        parent_id=folder.parent_id,
        created_at=folder.created_at,
        updated_at=folder.updated_at,
    )


def _file_record(file_instance: File) -> FileRecord:
    return FileRecord(
        id=file_instance.id,
        name=file_instance.name,
        file_type=file_instance.file_type,
        mime_type=file_instance.mime_type,
        size_bytes=file_instance.size_bytes,
        path=file_instance.file.name,
        user_id=file_instance.user_id,
        folder_id=file_instance.folder_id,
        is_public=file_instance.is_public,
        checksum_sha256=file_instance.checksum_sha256,
        created_at=file_instance.created_at,
        updated_at=file_instance.updated_at,
    )


@final
class DatabaseRepository:
    """StorageRepository persisting through the Django ORM.

    Usage counters live in UserQuota rows; every method that changes file
    rows updates the owner's quota in the same transaction.
    """

    # Storage accounts

    def get_account(self, user_id: int) -> StorageAccount:
        """Get storage account, creating it with the default limit.

        Raises:
            NotFoundError: If the user does not exist.
        """
        return _account_record(self._get_or_create_quota(user_id))

    def update_user_storage(
        self,
        user_id: int,
        delta_bytes: int,
    ) -> StorageAccount:
        """Atomically add ``delta_bytes`` to the usage, clamping at zero.

        Raises:
            NotFoundError: If the user does not exist.
        """
        with transaction.atomic():
            self._get_or_create_quota(user_id)
            if delta_bytes >= 0:
                UserQuota.objects.filter(user_id=user_id).update(
                    used_bytes=F(_USED_BYTES_FIELD) + delta_bytes,
                )
                quota = UserQuota.objects.get(user_id=user_id)
            else:
                quota = UserQuota.objects.select_for_update().get(
                    user_id=user_id,
                )
                quota.used_bytes = max(0, quota.used_bytes + delta_bytes)
                quota.save(update_fields=[_USED_BYTES_FIELD])

        logger.debug(
            'Adjusted usage for user %d by %d bytes (new: %d)',
            user_id,
            delta_bytes,
            quota.used_bytes,
        )
        return _account_record(quota)

    # Folders

    def create_folder(
        self,
        user_id: int,
        name: str,
        parent_id: int | None = None,
    ) -> FolderRecord:
        """Create a folder under ``parent_id`` (root when None)."""
        folder = Folder.objects.create(
            user_id=user_id,
            name=name,
            parent_id=parent_id,
        )
        return _folder_record(folder)

    def get_folders_by_user_id(
        self,
        user_id: int,
        parent_id: FolderFilter = ANY,
    ) -> list[FolderRecord]:
        """List user's folders, optionally only children of ``parent_id``."""
        folders = Folder.objects.filter(user_id=user_id)
        if parent_id is not ANY:
            folders = folders.filter(parent_id=parent_id)
        return [_folder_record(folder) for folder in folders]

    def get_folder_by_id(self, folder_id: int) -> FolderRecord | None:
        """Get folder or None."""
        folder = Folder.objects.filter(id=folder_id).first()
        return _folder_record(folder) if folder else None

    def delete_folder(self, folder_id: int) -> list[FileRecord]:
        """Delete folder with its files and subfolders, recursively.

        Files are removed before folders and the freed bytes are given
        back to their owners, all in one transaction.

        Returns:
            Records of every file removed on the way.
        """
        with transaction.atomic():
            if not Folder.objects.filter(id=folder_id).exists():
                return []

            folder_ids = self._collect_subtree(folder_id)
            files = list(File.objects.filter(folder_id__in=folder_ids))
            removed = [_file_record(file_instance) for file_instance in files]

            freed_by_user: dict[int, int] = defaultdict(int)
            for file_record in removed:
                freed_by_user[file_record.user_id] += file_record.size_bytes

            File.objects.filter(
                id__in=[file_record.id for file_record in removed],
            ).delete()
            for user_id, freed_bytes in freed_by_user.items():
                self.update_user_storage(user_id, -freed_bytes)

            Folder.objects.filter(id__in=folder_ids).delete()

        logger.info(
            'Deleted folder %d: %d folders, %d files',
            folder_id,
            len(folder_ids),
            len(removed),
        )
        return removed

    # Files

    def create_file(self, new_file: NewFile) -> FileRecord:
        """Store file record and charge its size to the owner.

        The owner's quota row stays locked from the space check to the
        charge, so concurrent uploads are checked one after another.

        Raises:
            QuotaExceededError: If the file does not fit the quota.
        """
        with transaction.atomic():
            self._get_or_create_quota(new_file.user_id)
            quota = UserQuota.objects.select_for_update().get(
                user_id=new_file.user_id,
            )
            if not quota.has_space_for(new_file.size_bytes):
                raise QuotaExceededError(
                    quota_bytes=quota.quota_bytes,
                    used_bytes=quota.used_bytes,
                    required_bytes=new_file.size_bytes,
                )
            file_instance = File.objects.create(
                name=new_file.name,
                file_type=new_file.file_type,
                mime_type=new_file.mime_type,
                size_bytes=new_file.size_bytes,
                file=new_file.path,
                user_id=new_file.user_id,
                folder_id=new_file.folder_id,
                is_public=new_file.is_public,
                checksum_sha256=new_file.checksum_sha256,
            )
            self.update_user_storage(new_file.user_id, new_file.size_bytes)

        logger.info(
            'File record created in database: %s (ID: %d)',
            new_file.path,
            file_instance.id,
        )
        return _file_record(file_instance)

    def get_file_by_id(self, file_id: int) -> FileRecord | None:
        """Get file or None."""
        file_instance = File.objects.filter(id=file_id).first()
        return _file_record(file_instance) if file_instance else None

    def get_files_by_user_id(
        self,
        user_id: int,
        folder_id: FolderFilter = ANY,
    ) -> list[FileRecord]:
        """List user's files, optionally only those inside ``folder_id``."""
        files = File.objects.filter(user_id=user_id)
        if folder_id is not ANY:
            files = files.filter(folder_id=folder_id)
        return [_file_record(file_instance) for file_instance in files]

    def get_files_by_folder_id(self, folder_id: int) -> list[FileRecord]:
        """List files directly inside a folder."""
        files = File.objects.filter(folder_id=folder_id)
        return [_file_record(file_instance) for file_instance in files]

    def get_file_by_path(self, path: str) -> FileRecord | None:
        """Get file by its storage path or None."""
        file_instance = File.objects.filter(file=path).first()
        return _file_record(file_instance) if file_instance else None

    def delete_file(self, file_id: int) -> FileRecord | None:
        """Remove file record and give its size back to the owner."""
        with transaction.atomic():
            file_instance = (
                File.objects.select_for_update().filter(id=file_id).first()
            )
            if file_instance is None:
                return None
            file_record = _file_record(file_instance)
            file_instance.delete()
            self.update_user_storage(
                file_record.user_id,
                -file_record.size_bytes,
            )

        logger.info('File record deleted from database: ID=%d', file_id)
        return file_record

    def search_files(self, user_id: int, query: str) -> list[FileRecord]:
        """Find user's files whose name or type contains ``query``."""
        files = File.objects.filter(
            Q(name__icontains=query) | Q(file_type__icontains=query),
            user_id=user_id,
        )
        return [_file_record(file_instance) for file_instance in files]

    def _get_or_create_quota(self, user_id: int) -> UserQuota:
        quota = UserQuota.objects.filter(user_id=user_id).first()
        if quota is not None:
            return quota

        if not User.objects.filter(id=user_id).exists():
            raise NotFoundError(f'User with ID {user_id} not found')

        quota, created = UserQuota.objects.get_or_create(
            user_id=user_id,
            defaults={'quota_bytes': settings.FILES_DEFAULT_QUOTA_BYTES},
        )
        if created:
            logger.info(
                'Created quota for user %d: %d bytes',
                user_id,
                quota.quota_bytes,
            )
        return quota

    def _collect_subtree(self, folder_id: int) -> list[int]:
        """Collect ids of a folder and all of its descendants."""
        collected = [folder_id]
        frontier = [folder_id]
        while frontier:
            frontier = list(
                Folder.objects.filter(
                    parent_id__in=frontier,
                ).exclude(
                    id__in=collected,
                ).values_list('id', flat=True),
            )
            collected.extend(frontier)
        return collected
