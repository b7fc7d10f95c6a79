"""
filedrop/core/exceptions.py

Custom exception hierarchy for the application.

The upload core returns these (it does not raise them past its public
API) so that partial results survive alongside the error. Controllers
inspect the type to pick the HTTP status code without leaking internals.
"""


class AppBaseException(Exception):
    """Root exception — catch-all for any application-level error."""


# ── Upload exceptions ──────────────────────────────────────────────────────────

class UploadError(AppBaseException):
    """Base class for every failure of an ingest call."""


class DirectoryCreateError(UploadError):
    """Raised when the destination directory cannot be created."""


class RequestTooLargeError(UploadError):
    """Raised when the request body exceeds the configured size ceiling."""


class MalformedRequestError(UploadError):
    """Raised when the request body is not a parseable multipart form."""


class PartOpenError(UploadError):
    """Raised when an uploaded part's stream cannot be opened or rewound."""


class PartReadError(UploadError):
    """Raised when reading an uploaded part (sniff or copy) fails."""


class FileTypeNotAllowedError(UploadError):
    """Raised when a part's sniffed content type is not in the allow-list."""

    def __init__(self, content_type: str, filename: str) -> None:
        super().__init__(f"File type '{content_type}' of '{filename}' is not allowed.")
        self.content_type = content_type
        self.filename = filename


class UnsafeFileNameError(UploadError):
    """Raised when a part's own file name cannot be used as a destination name."""


class FileCreateError(UploadError):
    """Raised when the destination file cannot be created."""


class FileWriteError(UploadError):
    """Raised when writing to the destination file fails."""


class EntropySourceUnavailableError(UploadError):
    """Raised when the OS random source cannot produce a file name."""


class NoFilesError(UploadError):
    """Raised when a single-file upload request carries no file part."""
