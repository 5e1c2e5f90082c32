"""Exceptions raised while converting boot animations."""


class BootAnimError(Exception):
    """Base class for all conversion errors."""


class IOFailure(BootAnimError, RuntimeError):
    """A file or archive could not be read or written."""


class MalformedDescriptor(BootAnimError, ValueError):
    """desc.txt contains a line that does not follow the grammar."""


class MissingDescriptor(BootAnimError, ValueError):
    """desc.txt is absent or has no header line."""


class NoFramesFound(BootAnimError, RuntimeError):
    """A part directory holds no PNG or JPG frames."""


class NoFramesToProcess(BootAnimError, RuntimeError):
    """Frame extraction produced nothing to partition."""


class InvalidColor(BootAnimError, ValueError):
    """A background color is not #RGB or #RRGGBB hex."""


class ExternalToolFailure(BootAnimError, RuntimeError):
    """ffmpeg or ffprobe exited with an error."""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr


class InvalidDimension(BootAnimError, ValueError):
    """A width, height, frame rate or part size is not usable."""


class MissingRequiredValue(BootAnimError, ValueError):
    """No source could supply a required output setting."""
