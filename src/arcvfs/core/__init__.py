"""
Core of the Archive Virtual File System: paths, formats, the handler base
class and registry, configuration, and dispatch.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""
