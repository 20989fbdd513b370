"""
Custom exception hierarchy for the media sorter.

Errors raised for a single file are collected by the pipeline stages and
reported together; the internal consistency errors are fatal.
"""


class MediaSorterError(Exception):
    """Base exception for all media sorter errors."""
    pass


class FileAccessError(MediaSorterError, OSError):
    """Raised when a file cannot be statted or read."""
    pass


class MetadataError(MediaSorterError):
    """Raised when embedded metadata of a supported format cannot be parsed."""
    pass


class MoveError(MediaSorterError):
    """Raised when a file cannot be relocated to its destination."""

    def __init__(self, source, destination, reason):
        super().__init__(f"Cannot move {source} -> {destination}: {reason}")
        self.source = source
        self.destination = destination
        self.reason = reason


class EmptyGroupError(MediaSorterError):
    """Raised when a group with no members is reduced. Should never happen."""
    pass


class PlanConflictError(MediaSorterError):
    """Raised when two files are planned onto the same destination path."""
    pass


class ExtractionFailedError(MediaSorterError):
    """Raised when one or more files could not be inspected."""

    def __init__(self, failures):
        super().__init__(f"{len(failures)} file(s) could not be inspected")
        self.failures = failures


class OperationCancelledError(MediaSorterError):
    """Raised when a stage was interrupted before all of its work ran."""
    pass
