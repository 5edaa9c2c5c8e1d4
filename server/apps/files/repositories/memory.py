"""In-memory storage repository.

Keeps folders, files and storage accounts in dictionaries. Data lives as
long as the process does; it suits development servers and tests.
"""

import dataclasses
import itertools
import logging
import threading
from collections.abc import Iterable
from typing import TypeVar, final

from django.conf import settings
from django.utils import timezone

from server.apps.files.exceptions import QuotaExceededError
from server.apps.files.repositories.records import (
    ANY,
    FileRecord,
    FolderFilter,
    FolderRecord,
    NewFile,
    StorageAccount,
)

logger = logging.getLogger(__name__)

RecordT = TypeVar('RecordT', FolderRecord, FileRecord)


def _newest_first(records: Iterable[RecordT]) -> list[RecordT]:
    return sorted(
        records,
        key=lambda record: (record.created_at, record.id),
        reverse=True,
    )


@final
class MemoryRepository:
    """StorageRepository backed by process memory."""

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._accounts: dict[int, StorageAccount] = {}
        self._folders: dict[int, FolderRecord] = {}
        self._files: dict[int, FileRecord] = {}
        self._folder_ids = itertools.count(1)
        self._file_ids = itertools.count(1)
        # Django's development server handles requests in threads
        self._lock = threading.RLock()

    # Storage accounts

    def get_account(self, user_id: int) -> StorageAccount:
        """Get storage account, creating it with the default limit."""
        with self._lock:
            account = self._accounts.get(user_id)
            if account is None:
                account = StorageAccount(
                    user_id=user_id,
                    used_bytes=0,
                    limit_bytes=settings.FILES_DEFAULT_QUOTA_BYTES,
                )
                self._accounts[user_id] = account
                logger.info(
                    'Created storage account for user %d: %d bytes',
                    user_id,
                    account.limit_bytes,
                )
            return account

    def update_user_storage(
        self,
        user_id: int,
        delta_bytes: int,
    ) -> StorageAccount:
        """Add ``delta_bytes`` to the usage, clamping at zero."""
        with self._lock:
            account = self.get_account(user_id)
            account = dataclasses.replace(
                account,
                used_bytes=max(0, account.used_bytes + delta_bytes),
            )
            self._accounts[user_id] = account

        logger.debug(
            'Adjusted usage for user %d by %d bytes (new: %d)',
            user_id,
            delta_bytes,
            account.used_bytes,
        )
        return account

    # Folders

    def create_folder(
        self,
        user_id: int,
        name: str,
        parent_id: int | None = None,
    ) -> FolderRecord:
        """Create a folder under ``parent_id`` (root when None)."""
        now = timezone.now()
        with self._lock:
            folder = FolderRecord(
                id=next(self._folder_ids),
                name=name,
                user_id=user_id,
                parent_id=parent_id,
                created_at=now,
                updated_at=now,
            )
            self._folders[folder.id] = folder
        return folder

    def get_folders_by_user_id(
        self,
        user_id: int,
        parent_id: FolderFilter = ANY,
    ) -> list[FolderRecord]:
        """List user's folders, optionally only children of ``parent_id``."""
        with self._lock:
            folders = [
                folder
                for folder in self._folders.values()
                if folder.user_id == user_id
                and (parent_id is ANY or folder.parent_id == parent_id)
            ]
        return _newest_first(folders)

    def get_folder_by_id(self, folder_id: int) -> FolderRecord | None:
        """Get folder or None."""
        return self._folders.get(folder_id)

    def delete_folder(self, folder_id: int) -> list[FileRecord]:
        """Delete folder with its files and subfolders, recursively.

        Returns:
            Records of every file removed on the way.
        """
        with self._lock:
            if folder_id not in self._folders:
                return []

            removed: list[FileRecord] = []
            for file_record in self.get_files_by_folder_id(folder_id):
                self.delete_file(file_record.id)
                removed.append(file_record)

            child_ids = [
                folder.id
                for folder in self._folders.values()
                if folder.parent_id == folder_id
            ]
            for child_id in child_ids:
                removed.extend(self.delete_folder(child_id))

            del self._folders[folder_id]

        logger.debug(
            'Deleted folder %d with %d files',
            folder_id,
            len(removed),
        )
        return removed

    # Files

    def create_file(self, new_file: NewFile) -> FileRecord:
        """Store file record and charge its size to the owner.

        Raises:
            QuotaExceededError: If the file does not fit the quota.
        """
        now = timezone.now()
        with self._lock:
            account = self.get_account(new_file.user_id)
            if not account.has_space_for(new_file.size_bytes):
                raise QuotaExceededError(
                    quota_bytes=account.limit_bytes,
                    used_bytes=account.used_bytes,
                    required_bytes=new_file.size_bytes,
                )
            file_record = FileRecord(
                id=next(self._file_ids),
                created_at=now,
                updated_at=now,
                **dataclasses.asdict(new_file),
            )
            self._files[file_record.id] = file_record
            self.update_user_storage(new_file.user_id, new_file.size_bytes)
        return file_record

    def get_file_by_id(self, file_id: int) -> FileRecord | None:
        """Get file or None."""
        return self._files.get(file_id)

    def get_files_by_user_id(
        self,
        user_id: int,
        folder_id: FolderFilter = ANY,
    ) -> list[FileRecord]:
        """List user's files, optionally only those inside ``folder_id``."""
        with self._lock:
            files = [
                file_record
                for file_record in self._files.values()
                if file_record.user_id == user_id
                and (folder_id is ANY or file_record.folder_id == folder_id)
            ]
        return _newest_first(files)

    def get_files_by_folder_id(self, folder_id: int) -> list[FileRecord]:
        """List files directly inside a folder."""
        with self._lock:
            files = [
                file_record
                for file_record in self._files.values()
                if file_record.folder_id == folder_id
            ]
        return _newest_first(files)

    def get_file_by_path(self, path: str) -> FileRecord | None:
        """Get file by its storage path or None."""
        with self._lock:
            return next(
                (
                    file_record
                    for file_record in self._files.values()
                    if file_record.path == path
                ),
                None,
            )

    def delete_file(self, file_id: int) -> FileRecord | None:
        """Remove file record and give its size back to the owner."""
        with self._lock:
            file_record = self._files.pop(file_id, None)
            if file_record is None:
                return None
            self.update_user_storage(
                file_record.user_id,
                -file_record.size_bytes,
            )
        return file_record

    def search_files(self, user_id: int, query: str) -> list[FileRecord]:
        """Find user's files whose name or type contains ``query``."""
        needle = query.lower()
        with self._lock:
            files = [
                file_record
                for file_record in self._files.values()
                if file_record.user_id == user_id
                and (
                    needle in file_record.name.lower()
                    or needle in file_record.file_type.lower()
                )
            ]
        return _newest_first(files)
