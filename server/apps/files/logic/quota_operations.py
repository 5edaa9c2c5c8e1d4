"""Business logic for storage quota operations."""

import logging
from typing import TypedDict

from server.apps.files.exceptions import QuotaExceededError
from server.apps.files.repositories import get_repository

logger = logging.getLogger(__name__)


class StorageSummary(TypedDict):
    used: int
    limit: int
    remaining: int


def get_storage_summary(user_id: int) -> StorageSummary:
    """Report used, total and remaining storage of a user.

    Args:
        user_id: Owner of the storage account.

    Returns:
        Dictionary with ``used``, ``limit`` and ``remaining`` bytes.
    """
    account = get_repository().get_account(user_id)
    return {
        'used': account.used_bytes,
        'limit': account.limit_bytes,
        'remaining': account.remaining_bytes,
    }


def check_quota(user_id: int, size_bytes: int) -> None:
    """Check if user has enough quota for an upload.

    Creates the storage account on demand if it doesn't exist.

    Args:
        user_id: User to check quota for.
        size_bytes: Size of the upload in bytes.

    Raises:
        QuotaExceededError: If upload would exceed quota.
    """
    account = get_repository().get_account(user_id)

    if not account.has_space_for(size_bytes):
        logger.warning(
            'Quota exceeded for user %d: need %d, have %d available',
            user_id,
            size_bytes,
            account.remaining_bytes,
        )
        raise QuotaExceededError(
            quota_bytes=account.limit_bytes,
            used_bytes=account.used_bytes,
            required_bytes=size_bytes,
        )


def recalculate_usage(user_id: int) -> tuple[int, int]:
    """Recalculate user's storage usage from stored files.

    Useful for fixing inconsistencies left by writes that bypassed the
    repository, such as manual database edits.

    Args:
        user_id: User to recalculate usage for.

    Returns:
        Tuple of (old usage, new usage) in bytes.
    """
    repository = get_repository()
    total = sum(
        file_record.size_bytes
        for file_record in repository.get_files_by_user_id(user_id)
    )

    old_usage = repository.get_account(user_id).used_bytes
    if total != old_usage:
        repository.update_user_storage(user_id, total - old_usage)

    logger.info(
        'Recalculated usage for user %d: %d -> %d bytes',
        user_id,
        old_usage,
        total,
    )
    return old_usage, total
