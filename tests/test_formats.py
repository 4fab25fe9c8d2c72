"""
Unit tests for arcvfs format detection.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""
import pytest

from arcvfs.core.formats import ArchiveFormat, detect, is_archive_format, stem


@pytest.mark.parametrize("name, expected", [
    ("report.tar.gz", ArchiveFormat.TAR_GZ),
    ("report.tgz", ArchiveFormat.TAR_GZ),
    ("report.tar.bz2", ArchiveFormat.TAR_BZ2),
    ("report.tbz2", ArchiveFormat.TAR_BZ2),
    ("report.tbz", ArchiveFormat.TAR_BZ2),
    ("report.tar.xz", ArchiveFormat.TAR_XZ),
    ("report.txz", ArchiveFormat.TAR_XZ),
    ("report.tar.zst", ArchiveFormat.TAR_ZST),
    ("report.tzst", ArchiveFormat.TAR_ZST),
    ("report.tar", ArchiveFormat.TAR),
    ("report.zip", ArchiveFormat.ZIP),
    ("app.jar", ArchiveFormat.ZIP),
    ("app.war", ArchiveFormat.ZIP),
    ("app.ear", ArchiveFormat.ZIP),
    ("app.apk", ArchiveFormat.ZIP),
    ("letter.docx", ArchiveFormat.ZIP),
    ("sheet.xlsx", ArchiveFormat.ZIP),
    ("slides.pptx", ArchiveFormat.ZIP),
    ("letter.odt", ArchiveFormat.ZIP),
    ("sheet.ods", ArchiveFormat.ZIP),
    ("slides.odp", ArchiveFormat.ZIP),
    ("report.gz", ArchiveFormat.GZ),
    ("report.bz2", ArchiveFormat.BZ2),
    ("report.xz", ArchiveFormat.XZ),
    ("report.zst", ArchiveFormat.ZST),
    ("report.zstd", ArchiveFormat.ZST),
    ("report.7z", ArchiveFormat.SEVEN_ZIP),
    ("report.rar", ArchiveFormat.RAR),
    ("report.cab", ArchiveFormat.CAB),
    ("report.arj", ArchiveFormat.ARJ),
    ("report.lzh", ArchiveFormat.LZH),
    ("report.lha", ArchiveFormat.LZH),
    ("report.ace", ArchiveFormat.ACE),
])
def test_detect(name, expected):
    assert detect(name) is expected


def test_detect_is_case_insensitive():
    assert detect("BACKUP.TAR.GZ") is ArchiveFormat.TAR_GZ
    assert detect("Photos.ZIP") is ArchiveFormat.ZIP


def test_compound_suffix_wins_over_codec_suffix():
    assert detect("report.tar.gz") is ArchiveFormat.TAR_GZ
    assert detect("report.gz") is ArchiveFormat.GZ
    assert detect("report.log.gz") is ArchiveFormat.GZ


@pytest.mark.parametrize("name", ["notes.txt", "archive", "", "zip", "image.png", "backup.tar.gz.part"])
def test_detect_unknown(name):
    assert detect(name) is None
    assert not is_archive_format(name)


def test_detect_uses_full_path():
    assert detect("/srv/data.d/bundle.tar.xz") is ArchiveFormat.TAR_XZ


def test_format_tags():
    assert ArchiveFormat.SEVEN_ZIP.value == "7z"
    assert ArchiveFormat.TAR_GZ.value == "tar.gz"
    assert str(ArchiveFormat.ZST) == "zst"


@pytest.mark.parametrize("path, expected", [
    ("logs/app.log.gz", "app.log"),
    ("dump.sql.bz2", "dump.sql"),
    ("data.XZ", "data"),
    ("trace.zstd", "trace"),
    ("bundle.tar.gz", "bundle"),
    ("C:\\dl\\readme.txt.gz", "readme.txt"),
    ("plain.txt", "plain.txt"),
])
def test_stem(path, expected):
    assert stem(path) == expected
