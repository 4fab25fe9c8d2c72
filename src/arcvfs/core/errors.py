"""
Exception types for the Archive Virtual File System.

Every failure raised by a handler or the dispatcher derives from ArchiveError,
so callers can catch one type and still tell the cases apart.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

from typing import Optional


class ArchiveError(Exception):
    """
    Base class for all archive errors.

    Attributes:
        archive_path: Path of the archive the operation was working on
        entry: Inner path of the offending entry, if any
    """

    def __init__(self, message: str, archive_path: Optional[str] = None, entry: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.archive_path = archive_path
        self.entry = entry

    def __str__(self):
        parts = [self.message]
        if self.archive_path:
            parts.append(f"archive={self.archive_path}")
        if self.entry:
            parts.append(f"entry={self.entry}")
        return " | ".join(parts)


class UnrecognizedFormat(ArchiveError):
    """The file name does not map to any known archive format."""


class NotAValidArchive(ArchiveError):
    """The container header or its entry table could not be parsed."""


class EntryNotFound(ArchiveError):
    """A read or extract target is not present in the archive."""


class FeatureNotCompiled(ArchiveError):
    """The format is recognized but no backend for it is available."""

    def __init__(self, message: str, archive_path: Optional[str] = None, format=None):
        super().__init__(message, archive_path=archive_path)
        self.format = format


class ArchiveIOError(ArchiveError):
    """Opening, reading or writing a host file failed."""


class BackendProcessFailure(ArchiveError):
    """An external helper process could not be run, exited non-zero, or produced unparsable output."""

    def __init__(self, message: str, archive_path: Optional[str] = None, entry: Optional[str] = None,
                 returncode: Optional[int] = None, stderr: str = ''):
        super().__init__(message, archive_path=archive_path, entry=entry)
        self.returncode = returncode
        self.stderr = stderr
