"""
ZIP archive handler for the Archive Virtual File System.
Provides access to ZIP format archives, including ZIP-based document and
package formats (.jar, .apk, .docx, .odt, ...).

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import zipfile
import zlib
from typing import BinaryIO, Iterator, Optional

from arcvfs.core.base_handler import ArchiveHandler, ArchiveMember, dos_time_to_timestamp
from arcvfs.core.formats import ArchiveFormat
from arcvfs.core.global_config import HandlerConfig
from arcvfs.core.path_resolver import normalize

# ZIP compression method ids (APPNOTE 4.4.5)
_COMPRESSION_LABELS = {
    0: 'Stored',
    1: 'Shrunk',
    6: 'Imploded',
    8: 'Deflated',
    9: 'Deflate64',
    12: 'Bzip2',
    14: 'Lzma',
    93: 'Zstd',
    95: 'Xz',
    98: 'Ppmd',
    99: 'Aes',
}


def compression_label(method: int) -> str:
    return _COMPRESSION_LABELS.get(method, f'Unknown({method})')


class ZipConfig(HandlerConfig):
    pass


class ZipHandler(ArchiveHandler):
    """
    Handler for ZIP format archives.
    """
    formats = {ArchiveFormat.ZIP}
    config = ZipConfig
    parse_errors = (zipfile.BadZipFile, zipfile.LargeZipFile, NotImplementedError,
                    zlib.error, EOFError, RuntimeError)

    def _open(self):
        self._index = None
        self.zip_file = zipfile.ZipFile(self._open_file(), 'r')

    def close(self) -> None:
        """Close the ZIP file."""
        if getattr(self, 'zip_file', None) is not None:
            self.zip_file.close()
            self.zip_file = None
        super().close()

    def _member(self, info: zipfile.ZipInfo) -> ArchiveMember:
        return ArchiveMember(
            path=normalize(info.filename),
            is_dir=info.is_dir(),
            size=info.file_size,
            compressed_size=info.compress_size,
            modified=dos_time_to_timestamp(info.date_time),
            compression=compression_label(info.compress_type),
            native=info,
        )

    def iter_members(self) -> Iterator[ArchiveMember]:
        for info in self.zip_file.infolist():
            yield self._member(info)

    def open_member(self, member: ArchiveMember) -> BinaryIO:
        return self.zip_file.open(member.native, 'r')

    def _lookup(self, inner_path: str) -> Optional[zipfile.ZipInfo]:
        """
        Find a member through the central directory.

        'name' and 'name/' both map to the same normalized key. Only the
        first record of a duplicated name is indexed, matching listings.
        """
        target = normalize(inner_path)
        if not target:
            return None
        if self._index is None:
            self._index = {}
            for info in self.zip_file.infolist():
                self._index.setdefault(normalize(info.filename), info)
        return self._index.get(target)

    def read(self, inner_path: str) -> bytes:
        """Read one member of the ZIP by name, without walking the member list."""
        info = self._lookup(inner_path)
        if info is None:
            return super().read(inner_path)
        if info.is_dir():
            return b''
        with self._translate_errors(normalize(inner_path)):
            return self.zip_file.read(info)
