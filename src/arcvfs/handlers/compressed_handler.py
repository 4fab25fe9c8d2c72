"""
Single-file compression handler for the Archive Virtual File System.
Provides access to gzip, bzip2, xz and zstd compressed files as archives
holding exactly one file.

The one entry is named after the archive with its compression suffix
removed. Its listed size is the compressed size on disk: the real size is
only known after decoding the whole stream.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import os
from typing import BinaryIO, Iterator

from arcvfs.core.base_handler import ArchiveHandler, ArchiveMember
from arcvfs.core.codecs import DECODE_ERRORS, STREAM_CODECS
from arcvfs.core.errors import NotAValidArchive
from arcvfs.core.formats import ArchiveFormat, stem
from arcvfs.core.global_config import HandlerConfig
from arcvfs.core.path_resolver import normalize


class CompressedConfig(HandlerConfig):
    pass


class CompressedFileHandler(ArchiveHandler):
    """
    Handler for compressed files, treating them as single-file archives.
    """
    formats = {ArchiveFormat.GZ, ArchiveFormat.BZ2, ArchiveFormat.XZ, ArchiveFormat.ZST}
    config = CompressedConfig
    parse_errors = DECODE_ERRORS

    def _open(self):
        self.codec = STREAM_CODECS[self.format]
        self.default_compression = self.codec.label
        self.base_name = normalize(stem(self.path))
        fileobj = self._open_file()
        if not self.codec.check_magic(fileobj):
            raise NotAValidArchive(f"Not {self.codec.name} compressed data", archive_path=self.path)
        stat = os.fstat(fileobj.fileno())
        self._size = stat.st_size
        self._mtime = int(stat.st_mtime)

    def iter_members(self) -> Iterator[ArchiveMember]:
        yield ArchiveMember(
            path=self.base_name,
            is_dir=False,
            size=self._size,
            compressed_size=self._size,
            modified=self._mtime,
            compression=self.codec.label,
        )

    def open_member(self, member: ArchiveMember) -> BinaryIO:
        self._fileobj.seek(0)
        return self.codec.open(self._fileobj)
