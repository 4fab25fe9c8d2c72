"""
Unit tests for arcvfs path handling.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""
import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

import pytest

from arcvfs.core.path_resolver import (
    PathResolver,
    basename,
    direct_child_key,
    is_descendant,
    normalize,
    split_archive_path,
)

SAMPLE_PATHS = [
    "",
    "/",
    "a",
    "a/",
    "/a/b/c.txt",
    "a\\b\\c.txt",
    "\\\\server\\share\\",
    "a//b///c",
    "./a/./b",
    "docs/readme.md/",
    "ÄÖÜ/ü.txt",
]


@pytest.mark.parametrize("raw, expected", [
    ("", ""),
    ("/", ""),
    ("a/b/c.txt", "a/b/c.txt"),
    ("/a/b/", "a/b"),
    ("a\\b\\c.txt", "a/b/c.txt"),
    ("\\a\\b\\", "a/b"),
    ("a//b", "a/b"),
    ("./a/b", "a/b"),
    ("./", ""),
])
def test_normalize(raw, expected):
    assert normalize(raw) == expected


@pytest.mark.parametrize("path", SAMPLE_PATHS)
def test_normalize_is_idempotent(path):
    once = normalize(path)
    assert normalize(once) == once


def test_is_descendant():
    assert is_descendant("a/b/c", "")
    assert is_descendant("a/b/c", "a")
    assert is_descendant("a/b/c", "a/b")
    assert is_descendant("a/b", "a/b")
    assert not is_descendant("a/bc", "a/b")
    assert not is_descendant("x/b", "a")
    assert not is_descendant("a", "a/b")


def test_direct_child_key():
    assert direct_child_key("a/b/c.txt", "") == "a"
    assert direct_child_key("a", "") == "a"
    assert direct_child_key("a/b/c.txt", "a") == "a/b"
    assert direct_child_key("a/b/c.txt", "a/b") == "a/b/c.txt"
    assert direct_child_key("a/b", "a") == "a/b"


@pytest.mark.parametrize("entry, parent", [
    ("a/b/c/d/e.txt", ""),
    ("a/b/c/d/e.txt", "a"),
    ("a/b/c/d/e.txt", "a/b/c"),
    ("a/b/c/d/e.txt", "a/b/c/d"),
])
def test_direct_child_key_is_one_level_deep(entry, parent):
    key = direct_child_key(entry, parent)
    assert is_descendant(key, parent)
    assert key != parent
    rest = key[len(parent) + 1:] if parent else key
    assert "/" not in rest
    assert direct_child_key(key, parent) == key


def test_basename():
    assert basename("a/b/c.txt") == "c.txt"
    assert basename("top") == "top"


def test_resolver_splits_archive_component():
    info = PathResolver().resolve("/data/backups/site.tar.gz/www/css/")
    assert info.physical_path == "/data/backups/site.tar.gz"
    assert info.inner_path == "www/css"
    assert info.in_archive


def test_resolver_archive_root():
    info = PathResolver().resolve("bundle.zip")
    assert info.physical_path == "bundle.zip"
    assert info.inner_path == ""
    assert info.in_archive


def test_resolver_plain_path():
    info = PathResolver().resolve("/etc/hosts")
    assert info.physical_path == "/etc/hosts"
    assert not info.in_archive


def test_resolver_rejects_empty_path():
    with pytest.raises(ValueError):
        PathResolver().resolve("")


def test_split_archive_path():
    assert split_archive_path("C:\\dl\\tools.7z\\bin\\x.exe") == ("C:/dl/tools.7z", "bin/x.exe")
    with pytest.raises(ValueError):
        split_archive_path("notes/todo.txt")
