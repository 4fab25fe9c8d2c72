"""
Dispatch of archive operations to the handler for the archive's format.

These three functions are the entry points used by outer layers:
list_archive, read_entry and extract_archive. Each call detects the format
from the file name, looks the handler up in HandlerManager, opens the
archive, performs the operation and closes the archive again.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import contextlib
from typing import Iterator, List, Optional, Sequence

from .base_handler import ArchiveHandler, ArchiveListing
from .errors import FeatureNotCompiled, UnrecognizedFormat
from .formats import ArchiveFormat, detect
from .handler_manager import HandlerManager
from .logging import debug_print


def detect_format(archive_path: str) -> ArchiveFormat:
    """
    Detect the format of an archive, failing loudly.

    Raises:
        UnrecognizedFormat: If the extension is not in the format table
    """
    fmt = detect(archive_path)
    if fmt is None:
        raise UnrecognizedFormat(f"Unrecognized archive format: {archive_path}", archive_path=archive_path)
    return fmt


def get_handler_for_path(archive_path: str):
    """
    Get the handler class able to open an archive.

    Raises:
        UnrecognizedFormat: If the extension is not in the format table
        FeatureNotCompiled: If the format is known but its handler is unavailable
    """
    fmt = detect_format(archive_path)
    handler_cls = HandlerManager.get_handler(fmt)
    if handler_cls is None:
        raise FeatureNotCompiled(
            f"Support for {fmt.value} archives is not available in this installation",
            archive_path=archive_path, format=fmt
        )
    return handler_cls, fmt


@contextlib.contextmanager
def open_archive(archive_path: str) -> Iterator[ArchiveHandler]:
    """Open an archive with the handler for its format and close it afterwards."""
    handler_cls, fmt = get_handler_for_path(archive_path)
    debug_print(f"opening {archive_path} as {fmt.value} with {handler_cls.__name__}", level=2)
    with handler_cls(archive_path, fmt) as handler:
        yield handler


def list_archive(archive_path: str, inner_path: str = '') -> ArchiveListing:
    """
    List the direct children of a directory inside an archive.

    Args:
        archive_path: Path to the archive file
        inner_path: Directory within the archive ('' for the root)

    Returns:
        ArchiveListing of the directory
    """
    with open_archive(archive_path) as handler:
        return handler.list_dir(inner_path)


def read_entry(archive_path: str, inner_path: str) -> bytes:
    """
    Read the full contents of one file inside an archive.

    Args:
        archive_path: Path to the archive file
        inner_path: File within the archive

    Returns:
        The decompressed bytes of the entry
    """
    with open_archive(archive_path) as handler:
        return handler.read(inner_path)


def extract_archive(archive_path: str, destination: str, selection: Optional[Sequence[str]] = None) -> List[str]:
    """
    Extract an archive, or the selected parts of it, into a directory.

    Not transactional: on failure, files already written remain. Extract into
    a temporary directory and rename it if atomicity is needed.

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract into
        selection: Inner paths to extract with everything below them; empty
                   or None extracts everything

    Returns:
        Host paths written
    """
    with open_archive(archive_path) as handler:
        return handler.extract(destination, selection)
