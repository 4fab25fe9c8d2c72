"""
arcvfs: Archive Virtual File System

A Python library that presents archives as browsable directory trees:
list, read and extract entries of ZIP, TAR (plain, gzip, bzip2, xz, zstd),
single-file compressed streams, and, where their backends are available,
7z, RAR, CAB, ARJ, LZH and ACE archives.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT

Public API:
    - ArchiveFS: Main entry point (.list, .read, .extract, .detect, .formats, .config)
    - list_archive, read_entry, extract_archive: Function entry points
    - detect, ArchiveFormat: Format detection
    - ArchiveError and its subclasses: Failure taxonomy

Example usage:
    from arcvfs import ArchiveFS
    fs = ArchiveFS()
    for entry in fs.list('bundle.tar.gz', 'docs').entries:
        print(entry.name, entry.entry_type.value, entry.size)
    data = fs.read('bundle.tar.gz', 'docs/readme.txt')
"""

import arcvfs.handlers
from .arcvfs import ArchiveFS
from .core.base_handler import ArchiveEntry, ArchiveListing, EntryType
from .core.dispatcher import extract_archive, list_archive, read_entry
from .core.errors import (
    ArchiveError,
    ArchiveIOError,
    BackendProcessFailure,
    EntryNotFound,
    FeatureNotCompiled,
    NotAValidArchive,
    UnrecognizedFormat,
)
from .core.formats import ArchiveFormat, detect
from .core.path_resolver import direct_child_key, is_descendant, normalize, split_archive_path

__version__ = '0.1.0'
__all__ = [
    "ArchiveFS",
    "ArchiveEntry",
    "ArchiveListing",
    "EntryType",
    "ArchiveFormat",
    "detect",
    "list_archive",
    "read_entry",
    "extract_archive",
    "normalize",
    "is_descendant",
    "direct_child_key",
    "split_archive_path",
    "ArchiveError",
    "ArchiveIOError",
    "BackendProcessFailure",
    "EntryNotFound",
    "FeatureNotCompiled",
    "NotAValidArchive",
    "UnrecognizedFormat",
]
