"""
Logging and debug output for the Archive Virtual File System.
Handles debug/info/warning/error output, querying the global config for the current debug level.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

from arcvfs.core.global_config import GlobalConfig


def debug_print(msg, level=1, exc=None):
    """
    Print debug output if the current debug level is >= level.
    If debug level is 4 or higher, also print the full stack traceback.

    Args:
        msg: Message to print
        level: Debug level threshold
        exc: Optional exception object (stack trace is printed at debug_level >= 4)
    """
    GlobalConfig.debug_print(msg, level=level, exc=exc)
