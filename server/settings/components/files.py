"""Settings of the files app: storage layer and upload limits."""

from typing import Final

from server.settings.components import config

_MEBIBYTE: Final = 1024 * 1024

# Dotted path of the repository class backing folders, files and quotas.
# The in-memory variant is
# 'server.apps.files.repositories.memory.MemoryRepository'.
FILES_REPOSITORY = config(
    'FILES_REPOSITORY',
    default='server.apps.files.repositories.database.DatabaseRepository',
)

# Storage limit given to every new account
FILES_DEFAULT_QUOTA_BYTES = config(
    'FILES_DEFAULT_QUOTA_BYTES',
    cast=int,
    default=10 * _MEBIBYTE,
)

# Largest single upload accepted
FILES_MAX_UPLOAD_BYTES = config(
    'FILES_MAX_UPLOAD_BYTES',
    cast=int,
    default=10 * _MEBIBYTE,
)

# Keep larger uploads on disk instead of memory while they are parsed
FILE_UPLOAD_MAX_MEMORY_SIZE = 2 * _MEBIBYTE
