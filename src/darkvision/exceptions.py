class DarkVisionError(Exception):
    """Base exception for DarkVision service."""


class ConfigurationError(DarkVisionError):
    """Raised when a threshold or setting value is invalid.

    ``field`` names the offending setting so callers can report it.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


class NotFoundError(DarkVisionError):
    """Raised when a requested document or attachment does not exist."""


class UpstreamError(DarkVisionError):
    """Raised when a collaborator (document or attachment store) fails."""


class StorageError(UpstreamError):
    """Raised when reading or writing the local media store fails."""


class AttachmentError(UpstreamError):
    """Raised when a media payload could not be attached to its document."""
