"""Exceptions for files app.

Every error carries the HTTP status the JSON API answers with, see
ApiErrorMiddleware.
"""

from http import HTTPStatus


class FilesError(Exception):
    """Base class for errors raised by folder, file and quota operations."""

    status = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message = 'Internal server error'

    def __init__(self, message: str | None = None) -> None:
        """Initialize error with an optional message.

        Args:
            message: Human readable message, class default when omitted.
        """
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequestError(FilesError):
    """Raised for malformed input."""

    status = HTTPStatus.BAD_REQUEST
    default_message = 'Bad request'


class InvalidFolderError(BadRequestError):
    """Raised when a target folder is missing or belongs to someone else."""

    default_message = 'Invalid folder'


class AccessDeniedError(FilesError):
    """Raised when a user touches a folder or file they cannot access."""

    status = HTTPStatus.FORBIDDEN
    default_message = 'Access denied'


class NotFoundError(FilesError):
    """Raised when a folder, file or blob does not exist."""

    status = HTTPStatus.NOT_FOUND
    default_message = 'Not found'


class NotPreviewableError(FilesError):
    """Raised when a file type cannot be rendered inline."""

    status = HTTPStatus.UNSUPPORTED_MEDIA_TYPE
    default_message = 'File type cannot be previewed'


class FileTooLargeError(FilesError):
    """Raised when a single upload is bigger than the upload limit."""

    status = HTTPStatus.REQUEST_ENTITY_TOO_LARGE

    def __init__(self, size_bytes: int, max_bytes: int) -> None:
        """Initialize FileTooLargeError.

        Args:
            size_bytes: Size of the rejected upload.
            max_bytes: Largest accepted upload.
        """
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes
        super().__init__(
            f'File too large: {size_bytes} bytes, '
            f'limit is {max_bytes} bytes',
        )


class QuotaExceededError(FilesError):
    """Raised when upload would exceed user's storage quota."""

    status = HTTPStatus.INSUFFICIENT_STORAGE

    def __init__(
        self,
        quota_bytes: int,
        used_bytes: int,
        required_bytes: int,
    ) -> None:
        """Initialize QuotaExceededError.

        Args:
            quota_bytes: Total quota limit in bytes.
            used_bytes: Currently used bytes.
            required_bytes: Bytes needed for the operation.
        """
        self.quota_bytes = quota_bytes
        self.used_bytes = used_bytes
        self.required_bytes = required_bytes

        available = max(0, quota_bytes - used_bytes)
        super().__init__(
            f'Not enough storage space: need {required_bytes} bytes, '
            f'only {available} bytes available '
            f'(quota: {quota_bytes}, used: {used_bytes})',
        )
