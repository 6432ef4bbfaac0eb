"""Exceptions raised by the clipboard access layer."""


class ClipboardError(Exception):
    """Base exception for clipboard errors."""

    def __init__(self, message, original_error=None):
        super().__init__(message)
        self.original_error = original_error


class BackendUnavailable(ClipboardError):
    """The clipboard backend could not be initialized."""


class ReadFailure(ClipboardError):
    pass


class WriteFailure(ClipboardError):
    pass


class ImageNotFound(ClipboardError):
    """The image file given to write_image does not exist."""


class UnsupportedPlatform(ClipboardError):
    pass


class ProbeError(ClipboardError):
    """A platform helper process failed. Never escapes a probe."""


class ProbeTimeout(ProbeError):
    pass


class ProbeFailure(ProbeError):
    pass
