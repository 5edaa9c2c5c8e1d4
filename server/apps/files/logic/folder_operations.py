"""Business logic for folder operations."""

import logging
from typing import Any, Final

from server.apps.files.exceptions import (
    AccessDeniedError,
    BadRequestError,
    InvalidFolderError,
    NotFoundError,
)
from server.apps.files.logic.file_operations import release_blobs
from server.apps.files.repositories import get_repository
from server.apps.files.repositories.records import (
    ANY,
    FolderFilter,
    FolderRecord,
)

# User type for Django's dynamic user model
_User = Any

_NAME_MAX_LENGTH: Final = 255
_RESERVED_NAMES: Final = frozenset(('.', '..'))

logger = logging.getLogger(__name__)


def validate_folder_name(name: str) -> str:
    """Normalize and validate a folder name.

    Args:
        name: Name as typed by the user.

    Returns:
        Name without surrounding whitespace.

    Raises:
        BadRequestError: If the name is empty, too long or contains '/'.
    """
    cleaned = name.strip()
    if not cleaned:
        raise BadRequestError('Folder name cannot be empty')
    if len(cleaned) > _NAME_MAX_LENGTH:
        raise BadRequestError(
            f'Folder name cannot be longer than {_NAME_MAX_LENGTH} characters',
        )
    if '/' in cleaned or cleaned in _RESERVED_NAMES:
        raise BadRequestError(f'Invalid folder name: {cleaned}')
    return cleaned


def create_folder(
    user: _User,
    name: str,
    parent_id: int | None = None,
) -> FolderRecord:
    """Create a folder in the user's root or inside ``parent_id``.

    Args:
        user: Owner of the new folder.
        name: Folder name.
        parent_id: Containing folder, None for the root directory.

    Returns:
        Created folder.

    Raises:
        BadRequestError: If the name is invalid.
        InvalidFolderError: If the parent is missing or not owned by user.
    """
    cleaned_name = validate_folder_name(name)
    repository = get_repository()

    if parent_id is not None:
        parent = repository.get_folder_by_id(parent_id)
        if parent is None or parent.user_id != user.id:
            logger.warning(
                'User %s tried to create folder in invalid parent %d',
                user.username,
                parent_id,
            )
            raise InvalidFolderError('Invalid parent folder')

    folder = repository.create_folder(user.id, cleaned_name, parent_id)
    logger.info(
        'Folder created: %s (ID: %d, parent: %s)',
        cleaned_name,
        folder.id,
        parent_id,
    )
    return folder


def get_folder(user: _User, folder_id: int) -> FolderRecord:
    """Get a folder owned by the user.

    Raises:
        NotFoundError: If folder doesn't exist.
        AccessDeniedError: If folder belongs to another user.
    """
    folder = get_repository().get_folder_by_id(folder_id)
    if folder is None:
        raise NotFoundError('Folder not found')
    if folder.user_id != user.id:
        logger.warning(
            'User %s denied access to folder %d',
            user.username,
            folder_id,
        )
        raise AccessDeniedError
    return folder


def list_folders(
    user: _User,
    parent_id: FolderFilter = ANY,
) -> list[FolderRecord]:
    """List the user's folders.

    Args:
        user: Owner of the folders.
        parent_id: ANY for every folder, None for root folders, or an id
            for the children of that folder.

    Returns:
        Folders, newest first.
    """
    if parent_id is not ANY and parent_id is not None:
        get_folder(user, parent_id)
    return get_repository().get_folders_by_user_id(user.id, parent_id)


def get_folder_path(user: _User, folder_id: int) -> list[FolderRecord]:
    """Build the breadcrumb chain from the root down to a folder.

    Args:
        user: Owner of the folder.
        folder_id: Folder at the end of the chain.

    Returns:
        Folders ordered from the top-level ancestor to ``folder_id``.
    """
    repository = get_repository()
    folder: FolderRecord | None = get_folder(user, folder_id)
    chain: list[FolderRecord] = []
    seen: set[int] = set()

    while folder is not None and folder.id not in seen:
        seen.add(folder.id)
        chain.append(folder)
        if folder.parent_id is None:
            break
        folder = repository.get_folder_by_id(folder.parent_id)

    chain.reverse()
    return chain


def delete_folder(user: _User, folder_id: int) -> int:
    """Delete a folder with all of its contents.

    Subfolders and files are removed recursively; their sizes are given
    back to the owner's quota and their blobs are released afterwards.

    Args:
        user: Owner of the folder.
        folder_id: Folder to delete.

    Returns:
        Number of files removed.
    """
    folder = get_folder(user, folder_id)
    removed = get_repository().delete_folder(folder.id)

    release_blobs(file_record.path for file_record in removed)

    logger.info(
        'Folder deleted: %s (ID: %d, files removed: %d)',
        folder.name,
        folder.id,
        len(removed),
    )
    return len(removed)
