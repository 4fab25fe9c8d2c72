"""
Base handler for archive types.
Defines the result structures and the interface that all archive handlers
implement, and holds the listing, read and extract algorithms shared by all
of them.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import calendar
import contextlib
import os
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, BinaryIO, Dict, Iterator, List, NamedTuple, Optional, Sequence, Set

from .errors import (ArchiveError, ArchiveIOError, BackendProcessFailure, EntryNotFound,
                     NotAValidArchive, UnrecognizedFormat)
from .formats import ArchiveFormat, detect
from .global_config import GlobalConfig, HandlerConfig
from .path_resolver import basename, direct_child_key, is_descendant, normalize


class EntryType(Enum):
    FILE = 'FILE'
    DIRECTORY = 'DIRECTORY'


class ArchiveMember(NamedTuple):
    """One native record as stored by the container, with its path already normalized."""
    path: str
    is_dir: bool
    size: int = 0
    compressed_size: int = 0
    modified: int = 0
    compression: str = ''
    native: Any = None


class ArchiveEntry(NamedTuple):
    """One node of the directory tree presented for an archive."""
    name: str
    inner_path: str
    entry_type: EntryType
    size: int
    compressed_size: int
    modified: int
    compression: str

    @property
    def is_dir(self) -> bool:
        return self.entry_type is EntryType.DIRECTORY

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'innerPath': self.inner_path,
            'type': self.entry_type.value,
            'size': self.size,
            'compressedSize': self.compressed_size,
            'modified': self.modified,
            'compression': self.compression,
        }


class ArchiveListing(NamedTuple):
    """The direct children of one inner path of an archive."""
    archive_path: str
    inner_path: str
    format: str
    entries: List[ArchiveEntry]
    total_size: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'archivePath': self.archive_path,
            'innerPath': self.inner_path,
            'format': self.format,
            'entries': [entry.to_dict() for entry in self.entries],
            'totalSize': self.total_size,
        }


def entry_sort_key(entry: ArchiveEntry):
    """Directories first, then case-insensitive name, then original-case name."""
    return (not entry.is_dir, entry.name.lower(), entry.name)


def dos_time_to_timestamp(date_time) -> int:
    """Convert a (Y, M, D, h, m, s) tuple to a Unix timestamp, 0 when it is not a valid date."""
    try:
        return calendar.timegm(tuple(date_time[:6]) + (0, 0, 0))
    except (TypeError, ValueError, OverflowError):
        return 0


class ArchiveHandler(ABC):
    """
    Base class for archive format handlers.

    A concrete handler opens the container in _open(), yields its native
    records from iter_members() and opens a member's data in open_member().
    Listing, reading and extraction are implemented here once.

    Subclasses declare the formats they serve in `formats`; defining the
    subclass registers it with HandlerManager.
    """

    formats: Set[ArchiveFormat] = set()
    config = HandlerConfig
    # Compression label for synthesized directories
    default_compression = 'Stored'
    # Native exceptions meaning the container is malformed
    parse_errors: tuple = ()
    # Native exceptions meaning a helper process failed
    process_errors: tuple = ()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if not cls.formats:
            return
        from arcvfs.core.handler_manager import HandlerManager
        for fmt in cls.formats:
            HandlerManager.register_handler(fmt, cls, cls.config)

    @classmethod
    def is_available(cls) -> bool:
        """Whether the libraries or tools this handler needs are present."""
        return True

    def __init__(self, path: str, format: Optional[ArchiveFormat] = None):
        """
        Open the archive for reading.

        Args:
            path: Path to the archive on the host filesystem
            format: Format to read the file as; detected from the path when omitted
        """
        self.path = path
        self.format = format or detect(path)
        if self.format not in self.formats:
            raise UnrecognizedFormat(f"{type(self).__name__} cannot read {path}", archive_path=path)
        self._fileobj = None
        try:
            with self._translate_errors():
                self._open()
        except ArchiveError:
            self._close_file()
            raise

    # --- Context management ---
    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # --- Logging and error handling ---
    def _log(self, msg, level=1, exc=None):
        GlobalConfig.debug_print(f"{type(self).__name__}: {msg}", level=level, exc=exc)

    @contextlib.contextmanager
    def _translate_errors(self, entry: Optional[str] = None):
        """Map native library exceptions onto the ArchiveError taxonomy."""
        try:
            yield
        except ArchiveError:
            raise
        except self.process_errors as e:
            self._log(f"helper process failed for {self.path}: {e}", level=1, exc=e)
            raise BackendProcessFailure(str(e), archive_path=self.path, entry=entry) from e
        except self.parse_errors as e:
            self._log(f"cannot parse {self.path}: {e}", level=1, exc=e)
            raise NotAValidArchive(f"Not a valid {self.format} archive: {e}",
                                   archive_path=self.path, entry=entry) from e
        except OSError as e:
            self._log(f"I/O error on {self.path}: {e}", level=1, exc=e)
            raise ArchiveIOError(f"Cannot read archive: {e}", archive_path=self.path, entry=entry) from e

    def _open_file(self) -> BinaryIO:
        """Open the archive file itself, reporting host failures as ArchiveIOError."""
        try:
            self._fileobj = open(self.path, 'rb')
        except OSError as e:
            raise ArchiveIOError(f"Cannot open archive: {e}", archive_path=self.path) from e
        return self._fileobj

    def _close_file(self):
        if self._fileobj is not None:
            self._fileobj.close()
            self._fileobj = None

    # --- Abstract methods ---
    @abstractmethod
    def _open(self) -> None:
        """Open the archive for access."""

    def close(self) -> None:
        """Close the archive, releasing any resources."""
        self._close_file()

    @abstractmethod
    def iter_members(self) -> Iterator[ArchiveMember]:
        """
        Yield every native record of the archive in storage order.

        Paths must already be normalized. Records that cannot be represented
        should be skipped rather than failing the whole iteration.
        """

    @abstractmethod
    def open_member(self, member: ArchiveMember) -> BinaryIO:
        """
        Open the decompressed data of a file member.

        Only valid while the iterator that produced the member is positioned on it.
        """

    # --- Shared operations ---
    def _make_entry(self, member: ArchiveMember) -> ArchiveEntry:
        return ArchiveEntry(
            name=basename(member.path),
            inner_path=member.path,
            entry_type=EntryType.DIRECTORY if member.is_dir else EntryType.FILE,
            size=0 if member.is_dir else member.size,
            compressed_size=0 if member.is_dir else member.compressed_size,
            modified=member.modified,
            compression=member.compression or self.default_compression,
        )

    def _synthesize_dir(self, path: str) -> ArchiveEntry:
        return ArchiveEntry(
            name=basename(path),
            inner_path=path,
            entry_type=EntryType.DIRECTORY,
            size=0,
            compressed_size=0,
            modified=0,
            compression=self.default_compression,
        )

    def list_dir(self, inner_path: str = '') -> ArchiveListing:
        """
        List the direct children of a directory inside the archive.

        Deeper entries are collapsed into a directory entry for the child that
        contains them; that entry is synthesized when the archive does not
        store it. Stored metadata always replaces a synthesized placeholder.

        Args:
            inner_path: Directory path within the archive ('' for the root)

        Returns:
            ArchiveListing sorted directories first, then by name
        """
        parent = normalize(inner_path)
        children: Dict[str, ArchiveEntry] = {}
        synthesized: Set[str] = set()

        with self._translate_errors(), contextlib.closing(self.iter_members()) as members:
            for member in members:
                path = member.path
                if not path or path == parent or not is_descendant(path, parent):
                    continue
                key = direct_child_key(path, parent)
                if path == key:
                    if key not in children or key in synthesized:
                        children[key] = self._make_entry(member)
                        synthesized.discard(key)
                elif key not in children:
                    children[key] = self._synthesize_dir(key)
                    synthesized.add(key)

        entries = sorted(children.values(), key=entry_sort_key)
        return ArchiveListing(
            archive_path=self.path,
            inner_path=parent,
            format=self.format.value,
            entries=entries,
            total_size=sum(entry.size for entry in entries),
        )

    def find_member(self, inner_path: str) -> Optional[ArchiveMember]:
        """Return the first stored record whose normalized path equals inner_path."""
        target = normalize(inner_path)
        with self._translate_errors(target), contextlib.closing(self.iter_members()) as members:
            for member in members:
                if member.path == target:
                    return member
        return None

    def read(self, inner_path: str) -> bytes:
        """
        Read the full decompressed contents of one entry.

        A stored directory record reads as empty bytes.

        Raises:
            EntryNotFound: If no stored record has this path
        """
        target = normalize(inner_path)
        if target:
            with self._translate_errors(target), contextlib.closing(self.iter_members()) as members:
                for member in members:
                    if member.path != target:
                        continue
                    if member.is_dir:
                        return b''
                    with self.open_member(member) as stream:
                        return stream.read()
        raise EntryNotFound(f"Entry not found: {target or '/'}", archive_path=self.path, entry=target)

    def _target_path(self, destination: str, inner_path: str) -> str:
        parts = inner_path.split('/')
        if '..' in parts:
            raise NotAValidArchive("Entry path escapes the extraction directory",
                                   archive_path=self.path, entry=inner_path)
        return os.path.join(destination, *parts)

    def _make_dirs(self, path: str, inner_path: str):
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            raise ArchiveIOError(f"Cannot create directory {path}: {e}",
                                 archive_path=self.path, entry=inner_path) from e

    def _write_member(self, member: ArchiveMember, target: str):
        parent = os.path.dirname(target)
        if parent:
            self._make_dirs(parent, member.path)
        try:
            dst = open(target, 'wb')
        except OSError as e:
            raise ArchiveIOError(f"Cannot write {target}: {e}",
                                 archive_path=self.path, entry=member.path) from e
        chunk_size = self.config.get('copy_buffer_size')
        # Only write failures are reported against the target; read failures propagate.
        with dst, self.open_member(member) as src:
            while True:
                chunk = src.read(chunk_size)
                if not chunk:
                    break
                try:
                    dst.write(chunk)
                except OSError as e:
                    raise ArchiveIOError(f"Cannot write {target}: {e}",
                                         archive_path=self.path, entry=member.path) from e

    @staticmethod
    def _selected(path: str, targets: Sequence[str], matched: Set[str]) -> bool:
        if not targets:
            return True
        hits = [t for t in targets if is_descendant(path, t)]
        matched.update(hits)
        return bool(hits)

    def _check_selection(self, targets: Sequence[str], matched: Set[str]):
        missing = [t for t in targets if t not in matched]
        if missing:
            raise EntryNotFound(f"Entries not found: {', '.join(t or '/' for t in missing)}",
                                archive_path=self.path, entry=missing[0])

    def extract(self, destination: str, selection: Optional[Sequence[str]] = None) -> List[str]:
        """
        Extract entries to a directory on the host filesystem.

        Extraction is not transactional: if it fails part way, files already
        written stay on disk.

        Args:
            destination: Directory to extract into
            selection: Inner paths to extract, each with everything below it.
                       Empty or None extracts the whole archive.

        Returns:
            Host paths written, in archive order
        """
        targets = [normalize(s) for s in selection or []]
        matched: Set[str] = set()
        written: List[str] = []
        seen: Set[str] = set()

        with self._translate_errors(), contextlib.closing(self.iter_members()) as members:
            for member in members:
                if not member.path or not self._selected(member.path, targets, matched):
                    continue
                if member.path in seen:
                    self._log(f"skipping duplicate record {member.path}", level=3)
                    continue
                seen.add(member.path)
                target = self._target_path(destination, member.path)
                if member.is_dir:
                    self._make_dirs(target, member.path)
                else:
                    self._log(f"extracting {member.path} -> {target}", level=3)
                    self._write_member(member, target)
                written.append(target)

        self._check_selection(targets, matched)
        return written
