"""
Command-line tool handlers for the Archive Virtual File System.
Provides access to CAB, ARJ, LZH/LHA and ACE archives by running a 7-Zip
compatible program ('7z' by default, configurable per format).

    7z l -slt -- ARCHIVE            technical listing, one block per member
    7z x -so -spd -- ARCHIVE NAME   one member to stdout
    7z x -y -spd -oDEST -- ARCHIVE [NAMES...]

Any failure to run the program, a non-zero exit status, or a listing that
cannot be parsed is reported as BackendProcessFailure.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import calendar
import io
import os
import shutil
import subprocess
import time
from typing import BinaryIO, Dict, Iterator, List, Optional, Sequence, Set

from arcvfs.core.base_handler import ArchiveHandler, ArchiveMember
from arcvfs.core.errors import BackendProcessFailure
from arcvfs.core.formats import ArchiveFormat
from arcvfs.core.global_config import HandlerConfig
from arcvfs.core.path_resolver import normalize

_LISTING_SEPARATOR = '----------'


def _parse_int(value: Optional[str]) -> int:
    try:
        return int(value) if value else 0
    except ValueError:
        return 0


def _parse_modified(value: Optional[str]) -> int:
    # '2021-03-04 05:06:07' optionally followed by fractional seconds
    if not value:
        return 0
    try:
        return calendar.timegm(time.strptime(value[:19], '%Y-%m-%d %H:%M:%S'))
    except ValueError:
        return 0


def parse_slt_listing(text: str) -> List[Dict[str, str]]:
    """
    Parse the output of '7z l -slt' into one dict of properties per member.

    Raises:
        ValueError: If the member section marker is missing
    """
    lines = text.splitlines()
    try:
        start = next(i for i, line in enumerate(lines) if line.strip() == _LISTING_SEPARATOR)
    except StopIteration:
        raise ValueError("no member section in listing output")

    records: List[Dict[str, str]] = []
    current: Dict[str, str] = {}
    for line in lines[start + 1:]:
        line = line.strip()
        if not line:
            if current:
                records.append(current)
                current = {}
            continue
        key, sep, value = line.partition(' = ')
        if sep:
            current[key] = value
        elif line.endswith(' ='):
            current[line[:-2]] = ''
    if current:
        records.append(current)
    return [record for record in records if 'Path' in record]


class ToolArchiveHandler(ArchiveHandler):
    """
    Base for handlers that drive an external 7-Zip compatible program.
    Subclasses only declare their format, config and compression label.
    """

    @classmethod
    def command(cls) -> str:
        return cls.config.get('seven_zip_command')

    @classmethod
    def is_available(cls) -> bool:
        return shutil.which(cls.command()) is not None

    def _run(self, args: List[str], entry: Optional[str] = None) -> bytes:
        cmd = [self.command()] + args
        self._log(f"running {' '.join(cmd)}", level=3)
        try:
            result = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        except OSError as e:
            raise BackendProcessFailure(f"Cannot run {cmd[0]}: {e}", archive_path=self.path, entry=entry) from e
        if result.returncode != 0:
            stderr = result.stderr.decode('utf-8', errors='replace').strip()
            raise BackendProcessFailure(
                f"{cmd[0]} exited with status {result.returncode}: {stderr}",
                archive_path=self.path, entry=entry, returncode=result.returncode, stderr=stderr
            )
        return result.stdout

    def _open(self):
        # Fail early on unreadable files; the tool opens the archive by name.
        self._open_file()
        self._close_file()
        self._records = None

    def _listing(self) -> List[Dict[str, str]]:
        if self._records is None:
            output = self._run(['l', '-slt', '--', self.path])
            try:
                self._records = parse_slt_listing(output.decode('utf-8', errors='replace'))
            except ValueError as e:
                raise BackendProcessFailure(f"Unparsable listing from {self.command()}: {e}",
                                            archive_path=self.path) from e
        return self._records

    def iter_members(self) -> Iterator[ArchiveMember]:
        for record in self._listing():
            is_dir = record.get('Folder') == '+' or record.get('Attributes', '').startswith('D')
            yield ArchiveMember(
                path=normalize(record['Path']),
                is_dir=is_dir,
                size=_parse_int(record.get('Size')),
                compressed_size=_parse_int(record.get('Packed Size')),
                modified=_parse_modified(record.get('Modified')),
                compression=record.get('Method') or self.default_compression,
                native=record['Path'],
            )

    def open_member(self, member: ArchiveMember) -> BinaryIO:
        data = self._run(['x', '-so', '-spd', '--', self.path, member.native], entry=member.path)
        return io.BytesIO(data)

    def extract(self, destination: str, selection: Optional[Sequence[str]] = None) -> List[str]:
        """
        Extract entries with a single tool invocation.

        Selection targets are resolved against the listing first, so a
        missing target fails before the tool writes anything.
        """
        targets = [normalize(s) for s in selection or []]
        matched: Set[str] = set()
        members = []
        seen: Set[str] = set()
        for member in self.iter_members():
            if not member.path or not self._selected(member.path, targets, matched):
                continue
            if member.path in seen:
                continue
            seen.add(member.path)
            members.append((member, self._target_path(destination, member.path)))
        self._check_selection(targets, matched)

        self._make_dirs(destination, '')
        if members:
            names = [member.native for member, _ in members] if targets else []
            self._run(['x', '-y', '-spd', '-o' + destination, '--', self.path] + names)

        written = []
        for member, target in members:
            if member.is_dir:
                self._make_dirs(target, member.path)
            if os.path.exists(target):
                written.append(target)
        return written


class CabConfig(HandlerConfig):
    pass


class CabHandler(ToolArchiveHandler):
    """Handler for Microsoft Cabinet archives."""
    formats = {ArchiveFormat.CAB}
    config = CabConfig
    default_compression = 'Cab'


class ArjConfig(HandlerConfig):
    pass


class ArjHandler(ToolArchiveHandler):
    """Handler for ARJ archives."""
    formats = {ArchiveFormat.ARJ}
    config = ArjConfig
    default_compression = 'Arj'


class LzhConfig(HandlerConfig):
    pass


class LzhHandler(ToolArchiveHandler):
    """Handler for LZH/LHA archives."""
    formats = {ArchiveFormat.LZH}
    config = LzhConfig
    default_compression = 'Lzh'


class AceConfig(HandlerConfig):
    pass


class AceHandler(ToolArchiveHandler):
    """
    Handler for ACE archives.

    Stock 7-Zip has no ACE decoder; point 'seven_zip_command' for this format
    at a build that has one, otherwise listing fails with the tool's error.
    """
    formats = {ArchiveFormat.ACE}
    config = AceConfig
    default_compression = 'Ace'
