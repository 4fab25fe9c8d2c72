"""
Path handling for the Archive Virtual File System.

Inner paths are forward-slash separated, relative to the archive root, with
no leading or trailing slash. The empty string is the archive root.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

from typing import NamedTuple, Optional

from .formats import detect


def normalize(path: str) -> str:
    """
    Canonicalize an inner path.

    Backslashes become forward slashes, leading and trailing slashes are
    stripped, and empty or '.' segments are dropped.

    Args:
        path: Raw path as stored by an archive or supplied by a caller

    Returns:
        Normalized inner path ('' for the archive root)
    """
    if not path:
        return ''
    parts = path.replace('\\', '/').split('/')
    return '/'.join(part for part in parts if part and part != '.')


def is_descendant(entry: str, parent: str) -> bool:
    """
    Check whether a normalized path lies inside a normalized parent.

    A path is considered inside itself; listings exclude the parent node separately.
    """
    if not parent:
        return True
    return entry == parent or entry.startswith(parent + '/')


def direct_child_key(entry: str, parent: str) -> str:
    """
    Collapse a descendant of parent into the direct child of parent that contains it.

    Args:
        entry: Normalized descendant path
        parent: Normalized parent path

    Returns:
        Normalized path one segment below parent
    """
    if not parent:
        return entry.split('/', 1)[0]
    rest = entry[len(parent) + 1:]
    return parent + '/' + rest.split('/', 1)[0]


def basename(path: str) -> str:
    """Last segment of a normalized path."""
    return path.rsplit('/', 1)[-1]


class PathInfo(NamedTuple):
    """Information about a resolved path with an archive component."""
    original_path: str
    physical_path: str
    inner_path: str

    @property
    def in_archive(self) -> bool:
        return detect(self.physical_path) is not None


class PathResolver:
    """
    Resolves combined paths containing an archive component.
    Parses paths like 'backups/site.tar.gz/www/index.html' into the
    physical archive path and the inner path below it.
    """

    def resolve(self, path: str) -> PathInfo:
        """
        Resolve a path that may contain an archive component.

        Args:
            path: Host path, optionally continuing inside an archive

        Returns:
            PathInfo with the physical path and the normalized inner path
        """
        if not path:
            raise ValueError("Path cannot be empty")

        path = path.replace('\\', '/')
        components = path.split('/')

        archive_index: Optional[int] = None
        for i, component in enumerate(components):
            if component and detect(component) is not None:
                archive_index = i
                break

        if archive_index is None:
            return PathInfo(original_path=path, physical_path=path, inner_path='')

        physical_path = '/'.join(components[:archive_index + 1])
        # keep absolute host paths absolute
        if path.startswith('/') and not physical_path.startswith('/'):
            physical_path = '/' + physical_path

        return PathInfo(
            original_path=path,
            physical_path=physical_path,
            inner_path=normalize('/'.join(components[archive_index + 1:]))
        )


def split_archive_path(path: str):
    """
    Split a combined path into (archive path, inner path).

    Raises:
        ValueError: If no component of the path is an archive
    """
    info = PathResolver().resolve(path)
    if not info.in_archive:
        raise ValueError(f"Path does not contain an archive component: {path}")
    return info.physical_path, info.inner_path
