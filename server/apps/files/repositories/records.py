"""Records returned by storage repositories.

Both repository implementations hand out these frozen records, so callers
never depend on whether data lives in memory or in the database.
"""

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Final


class _Unset(enum.Enum):
    any = 'any'


# Filter value meaning "do not filter by this field"
ANY: Final = _Unset.any

FolderFilter = int | None | _Unset


@dataclass(frozen=True, slots=True)
class StorageAccount:
    """Storage usage of one user."""

    user_id: int
    used_bytes: int
    limit_bytes: int

    @property
    def remaining_bytes(self) -> int:
        """Bytes left before the limit, never negative."""
        return max(0, self.limit_bytes - self.used_bytes)

    def has_space_for(self, size_bytes: int) -> bool:
        """Check if an upload of ``size_bytes`` fits."""
        return self.used_bytes + size_bytes <= self.limit_bytes


@dataclass(frozen=True, slots=True)
class FolderRecord:
    id: int
    name: str
    user_id: int
    parent_id: int | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class NewFile:
    """Data needed to register an uploaded blob."""

    name: str
    file_type: str
    mime_type: str
    size_bytes: int
    path: str
    user_id: int
    folder_id: int | None = None
    is_public: bool = False
    checksum_sha256: str = ''


@dataclass(frozen=True, slots=True)
class FileRecord:
    id: int
    name: str
    file_type: str
    mime_type: str
    size_bytes: int
    path: str
    user_id: int
    folder_id: int | None
    is_public: bool
    checksum_sha256: str
    created_at: datetime
    updated_at: datetime
