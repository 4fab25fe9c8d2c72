"""
Decompressing stream wrappers shared by the tar and single-file handlers.

Each codec turns a raw binary file object into a readable stream of
decompressed bytes. Closing the wrapper never closes the raw file.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import bz2
import gzip
import lzma
import zlib
from typing import BinaryIO, Callable, Dict, NamedTuple

import zstandard

from .formats import ArchiveFormat


class Codec(NamedTuple):
    """A decompression codec that can sit in front of a tar reader or stand alone."""
    name: str
    label: str
    magic: bytes
    open: Callable[[BinaryIO], BinaryIO]

    def check_magic(self, fileobj: BinaryIO) -> bool:
        """Return True if the stream starts with this codec's magic number. Rewinds the stream."""
        if not self.magic:
            return True
        fileobj.seek(0)
        head = fileobj.read(len(self.magic))
        fileobj.seek(0)
        return head == self.magic


class DecodeError(Exception):
    """Compressed data that a codec cannot decode."""


class _BZ2Reader(bz2.BZ2File):
    """BZ2File that tells corrupt data apart from host read failures."""

    def read(self, size=-1):
        try:
            return super().read(size)
        except OSError as e:
            # the decompressor reports bad data as an OSError without errno
            if e.errno is not None:
                raise
            raise DecodeError(str(e)) from e


class _Unclosable:
    """Pass-through reader whose close() leaves the raw file open."""

    def __init__(self, fileobj: BinaryIO):
        self._fileobj = fileobj

    def read(self, size=-1):
        return self._fileobj.read(size)

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def _open_zstd(fileobj: BinaryIO) -> BinaryIO:
    return zstandard.ZstdDecompressor().stream_reader(fileobj, read_across_frames=True, closefd=False)


IDENTITY = Codec('identity', 'Stored', b'', _Unclosable)
GZIP = Codec('gzip', 'Gzip', b'\x1f\x8b', lambda f: gzip.GzipFile(fileobj=f, mode='rb'))
BZIP2 = Codec('bzip2', 'Bzip2', b'BZh', lambda f: _BZ2Reader(f, mode='rb'))
XZ = Codec('xz', 'Xz', b'\xfd7zXZ\x00', lambda f: lzma.LZMAFile(f, mode='rb'))
ZSTD = Codec('zstd', 'Zstd', b'\x28\xb5\x2f\xfd', _open_zstd)

TAR_CODECS: Dict[ArchiveFormat, Codec] = {
    ArchiveFormat.TAR: IDENTITY,
    ArchiveFormat.TAR_GZ: GZIP,
    ArchiveFormat.TAR_BZ2: BZIP2,
    ArchiveFormat.TAR_XZ: XZ,
    ArchiveFormat.TAR_ZST: ZSTD,
}

STREAM_CODECS: Dict[ArchiveFormat, Codec] = {
    ArchiveFormat.GZ: GZIP,
    ArchiveFormat.BZ2: BZIP2,
    ArchiveFormat.XZ: XZ,
    ArchiveFormat.ZST: ZSTD,
}

# Raised by the wrappers on corrupt or truncated input. Host read failures
# stay plain OSError and are not listed here.
DECODE_ERRORS = (DecodeError, gzip.BadGzipFile, EOFError, zlib.error, lzma.LZMAError, zstandard.ZstdError)
