"""Business logic layer for files app.

This package contains all business logic for file operations:
- Upload, download, preview and delete of files
- Nested folder management with recursive deletion
- Storage quota accounting

Persistence goes through the configured StorageRepository, blobs through
the default Django storage.
"""
