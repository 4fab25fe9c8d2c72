"""
RAR archive handler for the Archive Virtual File System.
Provides access to RAR archives through rarfile, when it is installed.

rarfile parses the archive headers itself; decompressing members needs one
of the tools it drives (unrar, unar, 7z or bsdtar). A missing tool is
reported as a helper process failure.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

from typing import BinaryIO, Iterator

try:
    import rarfile
except ImportError:
    rarfile = None

from arcvfs.core.base_handler import ArchiveHandler, ArchiveMember, dos_time_to_timestamp
from arcvfs.core.formats import ArchiveFormat
from arcvfs.core.global_config import HandlerConfig
from arcvfs.core.path_resolver import normalize


class RarConfig(HandlerConfig):
    pass


class RarHandler(ArchiveHandler):
    """
    Handler for RAR archives (v3 and v5).
    """
    formats = {ArchiveFormat.RAR}
    config = RarConfig
    default_compression = 'Rar'
    process_errors = (rarfile.RarCannotExec, rarfile.RarExecError) if rarfile is not None else ()
    parse_errors = (rarfile.Error, EOFError) if rarfile is not None else ()

    @classmethod
    def is_available(cls) -> bool:
        return rarfile is not None

    def _open(self):
        # rarfile re-opens by name when it hands members to an external tool
        self._open_file()
        self._close_file()
        self.rar_file = rarfile.RarFile(self.path)

    def close(self) -> None:
        if getattr(self, 'rar_file', None) is not None:
            self.rar_file.close()
            self.rar_file = None
        super().close()

    def iter_members(self) -> Iterator[ArchiveMember]:
        for info in self.rar_file.infolist():
            stored = info.compress_type == rarfile.RAR_M0
            yield ArchiveMember(
                path=normalize(info.filename),
                is_dir=info.is_dir(),
                size=info.file_size or 0,
                compressed_size=info.compress_size or 0,
                modified=dos_time_to_timestamp(info.date_time) if info.date_time else 0,
                compression='Stored' if stored else self.default_compression,
                native=info,
            )

    def open_member(self, member: ArchiveMember) -> BinaryIO:
        return self.rar_file.open(member.native)
