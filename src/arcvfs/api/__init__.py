"""
Public API objects exposed on ArchiveFS.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""
