"""
arcvfs: Archive Virtual File System

A Python library that presents archives as browsable directory trees,
whatever their container format.

This module combines the dispatcher, path resolution and configuration into
the ArchiveFS class.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

from typing import List, Optional, Sequence

from .api.config_api import ConfigAPI
from .core.base_handler import ArchiveListing
from .core.dispatcher import extract_archive, list_archive, read_entry
from .core.formats import ArchiveFormat, detect
from .core.handler_manager import HandlerManager
from .core.path_resolver import PathResolver


class ArchiveFS:
    """
    Main entry point for the Archive Virtual File System.

    Every call opens the archive, works on it and closes it again; an
    ArchiveFS instance holds no per-archive state and can be shared.

    Attributes:
        config: Configuration (global and per handler)

    Example:
        fs = ArchiveFS()
        listing = fs.list('site.tar.gz', 'www')
        data = fs.read('site.tar.gz', 'www/index.html')
        fs.extract('site.tar.gz', '/tmp/site', ['www/css'])
        fs.list_path('backups/site.tar.gz/www')
    """

    def __init__(self):
        self._path_resolver = PathResolver()
        self.config = ConfigAPI()

    def detect(self, path: str) -> Optional[ArchiveFormat]:
        """Detect the archive format of a path from its extension."""
        return detect(path)

    def formats(self) -> List[ArchiveFormat]:
        """Formats that can be opened in this process."""
        return HandlerManager.available_formats()

    def list(self, archive_path: str, inner_path: str = '') -> ArchiveListing:
        """List the direct children of a directory inside an archive."""
        return list_archive(archive_path, inner_path)

    def read(self, archive_path: str, inner_path: str) -> bytes:
        """Read one file inside an archive."""
        return read_entry(archive_path, inner_path)

    def extract(self, archive_path: str, destination: str, selection: Optional[Sequence[str]] = None) -> List[str]:
        """Extract an archive, or the selected parts of it, and return the host paths written."""
        return extract_archive(archive_path, destination, selection)

    def list_path(self, path: str) -> ArchiveListing:
        """
        List a combined path such as 'backups/site.tar.gz/www'.

        Raises:
            ValueError: If no component of the path is an archive
        """
        info = self._resolve(path)
        return self.list(info.physical_path, info.inner_path)

    def read_path(self, path: str) -> bytes:
        """Read a combined path such as 'backups/site.tar.gz/www/index.html'."""
        info = self._resolve(path)
        return self.read(info.physical_path, info.inner_path)

    def _resolve(self, path: str):
        info = self._path_resolver.resolve(path)
        if not info.in_archive:
            raise ValueError(f"Path does not contain an archive component: {path}")
        return info
