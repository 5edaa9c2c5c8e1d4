"""Storage repositories for folders, files and quotas.

Two implementations share the StorageRepository interface:
- MemoryRepository keeps everything in process memory
- DatabaseRepository persists through the Django ORM

The ``FILES_REPOSITORY`` setting picks the one used by the logic layer.
"""

import logging

from django.conf import settings
from django.utils.module_loading import import_string

from server.apps.files.repositories.base import StorageRepository

logger = logging.getLogger(__name__)

_instances: dict[str, StorageRepository] = {}


def get_repository() -> StorageRepository:
    """Get the process-wide repository configured in settings.

    Instances are kept per dotted path, so the in-memory repository
    holds its data for the lifetime of the process.

    Returns:
        Configured StorageRepository instance.
    """
    dotted_path = settings.FILES_REPOSITORY
    repository = _instances.get(dotted_path)
    if repository is None:
        logger.info('Initializing storage repository: %s', dotted_path)
        repository = import_string(dotted_path)()
        _instances[dotted_path] = repository
    return repository


def reset_repositories() -> None:
    """Forget created repository instances, dropping in-memory data."""
    _instances.clear()
