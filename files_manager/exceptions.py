"""Errors raised by the services and rendered by the HTTP layer."""


class FilesManagerError(Exception):
    """Base class for errors with an HTTP status."""

    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(FilesManagerError):
    """Missing, invalid or expired credentials or token."""

    status_code = 401
    default_message = "Unauthorized"


class ValidationError(FilesManagerError):
    """Malformed request field. The message names the field."""

    status_code = 400
    default_message = "Bad Request"


class NotFound(FilesManagerError):
    """Record absent, or not visible to the caller."""

    status_code = 404
    default_message = "Not found"


class InternalError(FilesManagerError):
    """Unexpected store or filesystem failure."""


class ThumbnailJobError(Exception):
    """A thumbnail job could not be processed."""
