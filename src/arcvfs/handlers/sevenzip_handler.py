"""
7z archive handler for the Archive Virtual File System.
Provides access to 7z archives through py7zr, when it is installed.

py7zr decodes solid blocks as a whole, so members are read by extracting
them into a temporary directory, and extraction is done in a single pass.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import io
import lzma
import os
import tempfile
from typing import BinaryIO, Iterator, List, Optional, Sequence, Set

try:
    import py7zr
    from py7zr.exceptions import ArchiveError as SevenZipArchiveError
    from py7zr.exceptions import PasswordRequired
except ImportError:
    py7zr = None

from arcvfs.core.base_handler import ArchiveHandler, ArchiveMember
from arcvfs.core.errors import EntryNotFound
from arcvfs.core.formats import ArchiveFormat
from arcvfs.core.global_config import HandlerConfig
from arcvfs.core.path_resolver import normalize


class SevenZipConfig(HandlerConfig):
    pass


class SevenZipHandler(ArchiveHandler):
    """
    Handler for 7z archives.
    """
    formats = {ArchiveFormat.SEVEN_ZIP}
    config = SevenZipConfig
    default_compression = '7z'
    parse_errors = (
        (py7zr.Bad7zFile, SevenZipArchiveError, PasswordRequired, lzma.LZMAError, EOFError, ValueError)
        if py7zr is not None else ()
    )

    @classmethod
    def is_available(cls) -> bool:
        return py7zr is not None

    def _open(self):
        self.archive = py7zr.SevenZipFile(self._open_file(), mode='r')

    def close(self) -> None:
        if getattr(self, 'archive', None) is not None:
            self.archive.close()
            self.archive = None
        super().close()

    def iter_members(self) -> Iterator[ArchiveMember]:
        for info in self.archive.list():
            try:
                modified = int(info.creationtime.timestamp()) if info.creationtime else 0
            except (AttributeError, OverflowError, OSError, ValueError):
                modified = 0
            yield ArchiveMember(
                path=normalize(info.filename),
                is_dir=bool(info.is_directory),
                size=info.uncompressed or 0,
                compressed_size=info.compressed or 0,
                modified=modified,
                compression=self.default_compression,
                native=info,
            )

    def _extract_to(self, destination: str, names: Optional[List[str]]):
        with self._translate_errors():
            self.archive.extract(path=destination, targets=names)
            self.archive.reset()

    def open_member(self, member: ArchiveMember) -> BinaryIO:
        with tempfile.TemporaryDirectory(prefix='arcvfs-7z-') as tmp:
            self._extract_to(tmp, [member.native.filename])
            extracted = os.path.join(tmp, member.native.filename)
            if not os.path.isfile(extracted):
                raise EntryNotFound(f"Entry not found: {member.path}", archive_path=self.path, entry=member.path)
            with open(extracted, 'rb') as f:
                return io.BytesIO(f.read())

    def extract(self, destination: str, selection: Optional[Sequence[str]] = None) -> List[str]:
        """
        Extract entries in one py7zr pass.

        Selection targets are resolved against the member list before anything
        is written, so a missing target leaves the destination untouched.
        """
        targets = [normalize(s) for s in selection or []]
        matched: Set[str] = set()
        members = []
        seen: Set[str] = set()
        with self._translate_errors():
            for member in self.iter_members():
                if not member.path or not self._selected(member.path, targets, matched):
                    continue
                if member.path in seen:
                    continue
                seen.add(member.path)
                members.append((member, self._target_path(destination, member.path)))
        self._check_selection(targets, matched)

        self._make_dirs(destination, '')
        if members:
            names = [member.native.filename for member, _ in members] if targets else None
            self._extract_to(destination, names)

        written = []
        for member, target in members:
            if member.is_dir:
                self._make_dirs(target, member.path)
            if os.path.exists(target):
                written.append(target)
        return written
