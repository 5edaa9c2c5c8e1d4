"""Metadata extraction utilities for files."""

import hashlib
import mimetypes
import secrets
import time
from pathlib import Path
from typing import BinaryIO, Final

from django.core.exceptions import ValidationError

_CHUNK_SIZE: Final = 8192  # 8KB chunks for checksum calculation
_FALLBACK_MIME_TYPE: Final = 'application/octet-stream'
_RANDOM_SUFFIX_LIMIT: Final = 10**9
_BYTE_UNITS: Final = ('Bytes', 'KB', 'MB', 'GB', 'TB', 'PB')
_KIBIBYTE: Final = 1024

# MIME types served inline. HTML and SVG can run scripts, so they are
# download only
PREVIEWABLE_MIME_TYPES: Final = frozenset((
    # Images
    'image/jpeg',
    'image/png',
    'image/gif',
    'image/webp',
    # PDFs
    'application/pdf',
    # Text
    'text/plain',
    'text/css',
    'text/javascript',
    # Videos
    'video/mp4',
    'video/webm',
    'video/ogg',
    # Audio
    'audio/mpeg',
    'audio/ogg',
    'audio/wav',
))


def detect_mime_type(file_obj: BinaryIO, filename: str) -> str:
    """Detect MIME type from file.

    Guesses from the filename extension first. Uploaded files also carry
    the content type announced by the client, which is used when the
    extension is unknown.

    Args:
        file_obj: File-like object, optionally with ``content_type``.
        filename: Filename with extension.

    Returns:
        MIME type string (e.g., 'image/jpeg', 'application/pdf').
        Returns 'application/octet-stream' if type cannot be determined.
    """
    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is not None:
        return mime_type
    return getattr(file_obj, 'content_type', None) or _FALLBACK_MIME_TYPE


def is_previewable(mime_type: str) -> bool:
    """Check whether a browser can render the MIME type inline."""
    return mime_type in PREVIEWABLE_MIME_TYPES


def calculate_checksum(file_obj: BinaryIO) -> str:
    """Calculate SHA256 checksum of file.

    Reads file in chunks to handle large files efficiently.
    Resets file pointer to beginning after calculation.

    Args:
        file_obj: File-like object to checksum.

    Returns:
        Hex-encoded SHA256 hash string.
    """
    sha256_hash = hashlib.sha256()

    file_obj.seek(0)

    for chunk in iter(lambda: file_obj.read(_CHUNK_SIZE), b''):
        sha256_hash.update(chunk)

    # Reset file pointer to beginning for subsequent operations
    file_obj.seek(0)

    return sha256_hash.hexdigest()


def get_file_size(file_obj: BinaryIO) -> int:
    """Get file size from file object.

    Args:
        file_obj: File-like object, Django files expose ``size``.

    Returns:
        File size in bytes.
    """
    size = getattr(file_obj, 'size', None)
    if size is not None:
        return size
    file_obj.seek(0)
    file_size = len(file_obj.read())
    file_obj.seek(0)
    return file_size


def extract_filename(storage_path: str) -> str:
    """Extract filename from storage path.

    Args:
        storage_path: Full path (e.g., '123/docs/file.pdf').

    Returns:
        Filename (e.g., 'file.pdf').
    """
    return Path(storage_path).name


def get_file_extension(filename: str) -> str:
    """Get file extension from filename.

    Args:
        filename: Filename (e.g., 'document.pdf').

    Returns:
        Extension without dot, lowercase (e.g., 'pdf').
        Returns empty string if no extension.
    """
    extension = Path(filename).suffix
    return extension.lstrip('.').lower()


def build_storage_path(user_id: int, filename: str) -> str:
    """Generate a unique storage key for a new upload.

    Example: (7, 'cv.pdf') -> '7/1718000000000-483920112-cv.pdf'

    Args:
        user_id: Owner's user ID.
        filename: Original filename, directories are dropped.

    Returns:
        Storage path inside the owner's namespace.
    """
    timestamp = time.time_ns() // 1_000_000
    random_part = secrets.randbelow(_RANDOM_SUFFIX_LIMIT)
    safe_name = extract_filename(filename.replace('\\', '/')) or 'file'
    return f'{user_id}/{timestamp}-{random_part}-{safe_name}'


def validate_storage_path(user_id: int, storage_path: str) -> None:
    """Validate storage path follows user isolation rules.

    Ensures the storage path starts with the user's ID to maintain
    multi-user isolation.

    Args:
        user_id: Owner's user ID.
        storage_path: Proposed storage path.

    Raises:
        ValidationError: If path doesn't start with user_id or is invalid.
    """
    if not storage_path:
        raise ValidationError('Storage path cannot be empty')

    path_parts = Path(storage_path).parts
    if '..' in path_parts:
        raise ValidationError('Storage path cannot leave the user directory')

    try:
        path_user_id = int(path_parts[0])
    except ValueError as error:
        raise ValidationError(
            'Storage path must start with user ID',
        ) from error

    if path_user_id != user_id:
        raise ValidationError(
            f'Storage path user ID ({path_user_id}) does not match '
            f'owner ({user_id})',
        )


def format_bytes(size_bytes: int, decimals: int = 2) -> str:
    """Format a byte count for humans.

    Example: 1536 -> '1.5 KB'

    Args:
        size_bytes: Number of bytes.
        decimals: Maximum number of decimals kept.

    Returns:
        Size with the largest fitting unit.
    """
    if size_bytes <= 0:
        return '0 Bytes'

    unit_index = 0
    size = float(size_bytes)
    while size >= _KIBIBYTE and unit_index < len(_BYTE_UNITS) - 1:
        size /= _KIBIBYTE
        unit_index += 1

    rounded = round(size, max(0, decimals))
    return f'{rounded:g} {_BYTE_UNITS[unit_index]}'
