"""
Archive handlers package for the Archive Virtual File System.
Contains implementations for the supported archive formats. Importing this
package registers every handler with HandlerManager.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

from .zip_handler import ZipHandler
from .tar_handler import TarHandler
from .compressed_handler import CompressedFileHandler
from .sevenzip_handler import SevenZipHandler
from .rar_handler import RarHandler
from .tool_handler import AceHandler, ArjHandler, CabHandler, LzhHandler

__all__ = [
    'ZipHandler',
    'TarHandler',
    'CompressedFileHandler',
    'SevenZipHandler',
    'RarHandler',
    'CabHandler',
    'ArjHandler',
    'LzhHandler',
    'AceHandler',
]
