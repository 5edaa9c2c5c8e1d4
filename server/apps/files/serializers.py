"""JSON representations of storage records."""

from typing import Any

from server.apps.files.infrastructure.metadata import is_previewable
from server.apps.files.repositories.records import FileRecord, FolderRecord


def serialize_folder(folder: FolderRecord) -> dict[str, Any]:
    return {
        'id': folder.id,
        'name': folder.name,
        'user_id': folder.user_id,
        'parent_id': folder.parent_id,
        'created_at': folder.created_at.isoformat(),
        'updated_at': folder.updated_at.isoformat(),
    }


def serialize_file(file_record: FileRecord) -> dict[str, Any]:
    """Represent a file; the storage path stays server side."""
    return {
        'id': file_record.id,
        'name': file_record.name,
        'file_type': file_record.file_type,
        'mime_type': file_record.mime_type,
        'size': file_record.size_bytes,
        'user_id': file_record.user_id,
        'folder_id': file_record.folder_id,
        'is_public': file_record.is_public,
        'is_previewable': is_previewable(file_record.mime_type),
        'checksum_sha256': file_record.checksum_sha256,
        'created_at': file_record.created_at.isoformat(),
        'updated_at': file_record.updated_at.isoformat(),
    }
