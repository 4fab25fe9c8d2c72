"""
Archive format detection for the Archive Virtual File System.

Formats are identified from the file name only, never from content.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import os
from enum import Enum
from typing import List, Optional, Tuple


class ArchiveFormat(Enum):
    """Closed set of container formats. The value is the tag reported in listings."""
    ZIP = 'zip'
    TAR = 'tar'
    TAR_GZ = 'tar.gz'
    TAR_BZ2 = 'tar.bz2'
    TAR_XZ = 'tar.xz'
    TAR_ZST = 'tar.zst'
    GZ = 'gz'
    BZ2 = 'bz2'
    XZ = 'xz'
    ZST = 'zst'
    SEVEN_ZIP = '7z'
    RAR = 'rar'
    CAB = 'cab'
    ARJ = 'arj'
    LZH = 'lzh'
    ACE = 'ace'

    def __str__(self):
        return self.value


# Order matters: compound suffixes must be tried before the bare codec suffix.
_SUFFIX_RULES: List[Tuple[Tuple[str, ...], ArchiveFormat]] = [
    (('.tar.gz', '.tgz'), ArchiveFormat.TAR_GZ),
    (('.tar.bz2', '.tbz2', '.tbz'), ArchiveFormat.TAR_BZ2),
    (('.tar.xz', '.txz'), ArchiveFormat.TAR_XZ),
    (('.tar.zst', '.tzst'), ArchiveFormat.TAR_ZST),
    (('.tar',), ArchiveFormat.TAR),
    (('.zip', '.jar', '.war', '.ear', '.apk',
      '.docx', '.xlsx', '.pptx', '.odt', '.ods', '.odp'), ArchiveFormat.ZIP),
    (('.gz',), ArchiveFormat.GZ),
    (('.bz2',), ArchiveFormat.BZ2),
    (('.xz',), ArchiveFormat.XZ),
    (('.zst', '.zstd'), ArchiveFormat.ZST),
    (('.7z',), ArchiveFormat.SEVEN_ZIP),
    (('.rar',), ArchiveFormat.RAR),
    (('.cab',), ArchiveFormat.CAB),
    (('.arj',), ArchiveFormat.ARJ),
    (('.lzh', '.lha'), ArchiveFormat.LZH),
    (('.ace',), ArchiveFormat.ACE),
]

SINGLE_FILE_FORMATS = frozenset({
    ArchiveFormat.GZ, ArchiveFormat.BZ2, ArchiveFormat.XZ, ArchiveFormat.ZST
})


def _match(path: str) -> Optional[Tuple[str, ArchiveFormat]]:
    if not path:
        return None
    lower_path = path.lower()
    for suffixes, fmt in _SUFFIX_RULES:
        for suffix in suffixes:
            if lower_path.endswith(suffix):
                return suffix, fmt
    return None


def detect(path: str) -> Optional[ArchiveFormat]:
    """
    Detect the archive format of a path from its extension.

    Args:
        path: Path or filename to check

    Returns:
        The matching ArchiveFormat, or None if the extension is not recognized
    """
    match = _match(path)
    return match[1] if match else None


def is_archive_format(path: str) -> bool:
    """Return True if the path has a recognized archive extension."""
    return _match(path) is not None


def stem(path: str) -> str:
    """
    Get the file name of a path without its archive extension.

    'logs/app.log.gz' -> 'app.log', 'bundle.tar.gz' -> 'bundle'.
    """
    filename = os.path.basename(path.replace('\\', '/'))
    match = _match(filename)
    if match:
        return filename[:-len(match[0])]
    return filename
