"""Exception hierarchy.

Every failure the renderer can hit is one of these. The library raises them;
only the command line turns them into a message and exit status 1.
"""
from typing import Optional


class RaycastError(Exception):
    """Base class. ``line`` is the 1-based scene line, or None."""

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        if self.line is None:
            return f"Error: {self.message}."
        return f"Error: {self.message} on line {self.line}."


class UsageError(RaycastError):
    pass


class ConfigError(RaycastError):
    pass


class SceneIOError(RaycastError):
    """Scene file missing or unreadable."""


class OutputError(RaycastError):
    """Output image could not be created or written."""


class LexicalError(RaycastError):
    pass


class UnexpectedEOFError(LexicalError):
    pass


class SchemaError(RaycastError):
    """Wrong, unknown or missing key for an object type."""


class SceneValueError(RaycastError):
    """A field value outside its allowed range."""


class StructureError(RaycastError):
    pass


class EmptySceneError(StructureError):
    pass


class DuplicateCameraError(StructureError):
    pass


class MissingCameraError(StructureError):
    pass


class TooManyObjectsError(StructureError):
    pass
