"""
Error Types

Exceptions raised by the synchronization engine and the configuration layer.
Storage failures are not wrapped: they surface as the ``OSError`` subclass the
backend raised (``IoError`` is provided as an alias for readability).

Author: dirmirror Project
License: MIT
"""

IoError = OSError


class DirMirrorError(Exception):
    """Base class for dirmirror errors."""


class ConflictError(DirMirrorError):
    """
    Two source directories contain a file with the same relative path.

    Raised before the target is modified, so a conflicting invocation leaves
    the target as it was (apart from creating the target root itself).

    Attributes:
        first_source: Source root that claimed the file first
        second_source: Source root that claimed the same file again
        target: Target root the sources were synchronized into
        relative_id: Relative path of the clashing file
    """

    def __init__(self, first_source: str, second_source: str, target: str, relative_id: str):
        super().__init__(
            f"Could not synchronize '{first_source}' and '{second_source}' into '{target}'. "
            f"Both sources contain file '{relative_id}'."
        )
        self.first_source = first_source
        self.second_source = second_source
        self.target = target
        self.relative_id = relative_id

    def __reduce__(self):
        return (self.__class__, (self.first_source, self.second_source, self.target, self.relative_id))


class ConfigError(DirMirrorError):
    """Configuration could not be parsed or failed validation."""
