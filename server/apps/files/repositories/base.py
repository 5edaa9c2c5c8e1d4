"""Interface shared by the storage repositories."""

from typing import Protocol

from server.apps.files.repositories.records import (
    ANY,
    FileRecord,
    FolderFilter,
    FolderRecord,
    NewFile,
    StorageAccount,
)


class StorageRepository(Protocol):
    """Folder, file and quota persistence.

    Implementations keep ``used_bytes`` of every account equal to the
    total size of the files they store for it: creating a file adds its
    size, deleting a file or a folder subtracts what was removed.
    """

    def get_account(self, user_id: int) -> StorageAccount:
        """Get the account, creating it with the default limit.

        Accounts are created for any user id the backend cannot prove
        unknown. The database backend checks the user table and raises
        NotFoundError for missing users; the memory backend has no user
        table and always creates the account.
        """

    def update_user_storage(
        self,
        user_id: int,
        delta_bytes: int,
    ) -> StorageAccount: ...

    def create_folder(
        self,
        user_id: int,
        name: str,
        parent_id: int | None = None,
    ) -> FolderRecord: ...

    def get_folders_by_user_id(
        self,
        user_id: int,
        parent_id: FolderFilter = ANY,
    ) -> list[FolderRecord]: ...

    def get_folder_by_id(self, folder_id: int) -> FolderRecord | None: ...

    def delete_folder(self, folder_id: int) -> list[FileRecord]: ...

    def create_file(self, new_file: NewFile) -> FileRecord:
        """Store the record and charge its size to the owner.

        The quota check and the charge happen atomically, so concurrent
        uploads cannot push usage over the limit together.

        Raises:
            QuotaExceededError: If the file does not fit the quota.
        """

    def get_file_by_id(self, file_id: int) -> FileRecord | None: ...

    def get_files_by_user_id(
        self,
        user_id: int,
        folder_id: FolderFilter = ANY,
    ) -> list[FileRecord]: ...

    def get_files_by_folder_id(self, folder_id: int) -> list[FileRecord]: ...

    def get_file_by_path(self, path: str) -> FileRecord | None: ...

    def delete_file(self, file_id: int) -> FileRecord | None: ...

    def search_files(self, user_id: int, query: str) -> list[FileRecord]: ...
