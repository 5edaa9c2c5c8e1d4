"""Infrastructure layer for files app.

This package contains integrations with external systems:
- S3-compatible blob storage backend
- Metadata extraction (MIME type, checksum, storage keys)

Keep infrastructure concerns separate from business logic.
"""
