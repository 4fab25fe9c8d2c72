"""
TAR archive handler for the Archive Virtual File System.
Provides access to TAR archives, plain or compressed with gzip, bzip2, xz or zstd.

The archive is always read in streaming mode behind a decompressing wrapper,
so the same member loop serves every codec.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import io
import tarfile
from typing import BinaryIO, Dict, Iterator

from arcvfs.core.base_handler import ArchiveHandler, ArchiveMember
from arcvfs.core.codecs import DECODE_ERRORS, TAR_CODECS
from arcvfs.core.errors import ArchiveIOError, EntryNotFound, NotAValidArchive
from arcvfs.core.formats import ArchiveFormat
from arcvfs.core.global_config import HandlerConfig
from arcvfs.core.path_resolver import normalize


class TarConfig(HandlerConfig):
    pass


class TarHandler(ArchiveHandler):
    """
    Handler for TAR archives. The codec in front of the tar reader is chosen by format.

    Regular files, directories and hard links are surfaced. A hard link is a
    file whose data is stored under an earlier member; it is read by a
    second pass over the archive.
    """
    formats = {
        ArchiveFormat.TAR,
        ArchiveFormat.TAR_GZ,
        ArchiveFormat.TAR_BZ2,
        ArchiveFormat.TAR_XZ,
        ArchiveFormat.TAR_ZST,
    }
    config = TarConfig
    parse_errors = (tarfile.TarError,) + DECODE_ERRORS

    def _open(self):
        self.codec = TAR_CODECS[self.format]
        self.default_compression = self.codec.label
        self._tar = None
        fileobj = self._open_file()
        if not self.codec.check_magic(fileobj):
            raise NotAValidArchive(f"Not {self.codec.name} compressed data", archive_path=self.path)

    def iter_members(self) -> Iterator[ArchiveMember]:
        self._fileobj.seek(0)
        stream = self.codec.open(self._fileobj)
        file_sizes: Dict[str, int] = {}
        try:
            with tarfile.open(fileobj=stream, mode='r|') as tar:
                self._tar = tar
                for info in tar:
                    path = normalize(info.name)
                    if info.isfile():
                        size = info.size
                        file_sizes.setdefault(path, size)
                    elif info.islnk():
                        size = file_sizes.get(normalize(info.linkname), 0)
                    elif info.isdir():
                        size = 0
                    else:
                        self._log(f"skipping non-regular member {info.name!r} (type {info.type!r})", level=3)
                        continue
                    yield ArchiveMember(
                        path=path,
                        is_dir=info.isdir(),
                        size=size,
                        compressed_size=0,
                        modified=int(info.mtime or 0),
                        compression=self.codec.label,
                        native=info,
                    )
        finally:
            self._tar = None
            stream.close()

    def open_member(self, member: ArchiveMember) -> BinaryIO:
        if member.native.islnk():
            return self._open_link_target(member)
        return self._tar.extractfile(member.native)

    def _open_link_target(self, member: ArchiveMember) -> BinaryIO:
        """Read the data a hard link points to, through a separate handle on the archive."""
        target = normalize(member.native.linkname)
        self._log(f"resolving hard link {member.path} -> {target}", level=3)
        try:
            raw = open(self.path, 'rb')
        except OSError as e:
            raise ArchiveIOError(f"Cannot open archive: {e}", archive_path=self.path, entry=member.path) from e
        with raw, self.codec.open(raw) as stream, tarfile.open(fileobj=stream, mode='r|') as tar:
            for info in tar:
                if info.isfile() and normalize(info.name) == target:
                    return io.BytesIO(tar.extractfile(info).read())
        raise EntryNotFound(f"Hard link target not found: {target}", archive_path=self.path, entry=member.path)
