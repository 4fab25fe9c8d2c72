"""
Unit tests for the arcvfs TAR handler, over every supported codec.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""
import bz2
import gzip
import io
import lzma
import os
import tarfile

import pytest
import zstandard

from arcvfs import EntryNotFound, EntryType, NotAValidArchive

CODECS = {
    "tar": (lambda data: data, "Stored"),
    "tar.gz": (gzip.compress, "Gzip"),
    "tgz": (gzip.compress, "Gzip"),
    "tar.bz2": (bz2.compress, "Bzip2"),
    "tbz2": (bz2.compress, "Bzip2"),
    "tar.xz": (lzma.compress, "Xz"),
    "txz": (lzma.compress, "Xz"),
    "tar.zst": (lambda data: zstandard.ZstdCompressor().compress(data), "Zstd"),
    "tzst": (lambda data: zstandard.ZstdCompressor().compress(data), "Zstd"),
}

FORMAT_TAGS = {
    "tar": "tar", "tar.gz": "tar.gz", "tgz": "tar.gz", "tar.bz2": "tar.bz2", "tbz2": "tar.bz2",
    "tar.xz": "tar.xz", "txz": "tar.xz", "tar.zst": "tar.zst", "tzst": "tar.zst",
}


def tar_bytes(members):
    """Build an uncompressed tar. members: (name, content or None for a directory, mtime)."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w", format=tarfile.GNU_FORMAT) as tar:
        for name, content, mtime in members:
            info = tarfile.TarInfo(name)
            info.mtime = mtime
            if content is None:
                info.type = tarfile.DIRTYPE
                tar.addfile(info)
            else:
                info.size = len(content)
                tar.addfile(info, io.BytesIO(content))
    return buf.getvalue()


def make_tar(tmp_path, ext, members):
    compress, _ = CODECS[ext]
    path = tmp_path / f"archive.{ext}"
    path.write_bytes(compress(tar_bytes(members)))
    return str(path)


SAMPLE = [
    ("docs", None, 1600000000),
    ("docs/readme.txt", b"read me", 1600000001),
    ("docs/guide/intro.md", b"# intro", 1600000002),
    ("src/main.py", b"print('hi')\n", 1600000003),
    ("top.txt", b"top level", 1600000004),
]


@pytest.mark.parametrize("ext", sorted(CODECS))
def test_list_root(fs, tmp_path, ext):
    path = make_tar(tmp_path, ext, SAMPLE)
    listing = fs.list(path)
    assert listing.format == FORMAT_TAGS[ext]
    assert [(e.name, e.entry_type) for e in listing.entries] == [
        ("docs", EntryType.DIRECTORY),
        ("src", EntryType.DIRECTORY),
        ("top.txt", EntryType.FILE),
    ]
    docs, src, top = listing.entries
    assert docs.modified == 1600000000
    assert src.modified == 0
    assert top.size == 9
    assert top.compressed_size == 0
    assert top.modified == 1600000004
    assert top.compression == CODECS[ext][1]
    assert src.compression == CODECS[ext][1]
    assert listing.total_size == 9


@pytest.mark.parametrize("ext", sorted(CODECS))
def test_read(fs, tmp_path, ext):
    path = make_tar(tmp_path, ext, SAMPLE)
    assert fs.read(path, "docs/guide/intro.md") == b"# intro"
    assert fs.read(path, "top.txt") == b"top level"
    assert fs.read(path, "docs") == b""


@pytest.mark.parametrize("ext", sorted(CODECS))
def test_extract(fs, tmp_path, ext):
    path = make_tar(tmp_path, ext, SAMPLE)
    dest = tmp_path / "out"
    fs.extract(path, str(dest))
    for name, content, _ in SAMPLE:
        if content is None:
            assert (dest / name).is_dir()
        else:
            assert (dest / name).read_bytes() == content


def test_list_nested(fs, tmp_path):
    path = make_tar(tmp_path, "tar.gz", SAMPLE)
    listing = fs.list(path, "docs")
    assert [(e.name, e.inner_path) for e in listing.entries] == [
        ("guide", "docs/guide"),
        ("readme.txt", "docs/readme.txt"),
    ]


def test_read_missing(fs, tmp_path):
    path = make_tar(tmp_path, "tar.xz", SAMPLE)
    with pytest.raises(EntryNotFound):
        fs.read(path, "docs/missing.txt")


def test_dot_slash_prefix(fs, tmp_path):
    path = make_tar(tmp_path, "tgz", [("./", None, 0), ("./pkg/file.txt", b"x", 0)])
    assert [e.name for e in fs.list(path).entries] == ["pkg"]
    assert fs.read(path, "pkg/file.txt") == b"x"


def test_symlinks_are_skipped(fs, tmp_path):
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w") as tar:
        data = b"real"
        info = tarfile.TarInfo("real.txt")
        info.size = len(data)
        tar.addfile(info, io.BytesIO(data))
        link = tarfile.TarInfo("link.txt")
        link.type = tarfile.SYMTYPE
        link.linkname = "real.txt"
        tar.addfile(link)
    path = tmp_path / "links.tar"
    path.write_bytes(buf.getvalue())
    assert [e.name for e in fs.list(str(path)).entries] == ["real.txt"]
    with pytest.raises(EntryNotFound):
        fs.read(str(path), "link.txt")


def test_extract_selection(fs, tmp_path):
    path = make_tar(tmp_path, "tar.bz2", SAMPLE)
    dest = tmp_path / "out"
    written = fs.extract(path, str(dest), ["docs/guide", "top.txt"])
    assert written == [
        os.path.join(str(dest), "docs", "guide", "intro.md"),
        os.path.join(str(dest), "top.txt"),
    ]
    assert not (dest / "docs" / "readme.txt").exists()
    assert not (dest / "src").exists()


def test_extract_missing_selection(fs, tmp_path):
    path = make_tar(tmp_path, "tar", SAMPLE)
    with pytest.raises(EntryNotFound):
        fs.extract(path, str(tmp_path / "out"), ["docs/guide", "nothing"])


def test_wrong_compression_magic(fs, tmp_path):
    path = tmp_path / "fake.tar.gz"
    path.write_bytes(bz2.compress(tar_bytes(SAMPLE)))
    with pytest.raises(NotAValidArchive):
        fs.list(str(path))


def test_garbage_tar(fs, tmp_path):
    path = tmp_path / "garbage.tar"
    path.write_bytes(b"\x01" * 2048)
    with pytest.raises(NotAValidArchive):
        fs.list(str(path))


def test_truncated_gzip(fs, tmp_path):
    data = gzip.compress(tar_bytes([("big.bin", os.urandom(64 * 1024), 0)]))
    path = tmp_path / "cut.tgz"
    path.write_bytes(data[:len(data) // 2])
    with pytest.raises(NotAValidArchive):
        fs.read(str(path), "big.bin")


def test_large_member_streams(fs, tmp_path):
    content = os.urandom(3 * 1024 * 1024)
    path = make_tar(tmp_path, "tar.zst", [("blob.bin", content, 0)])
    fs.config.copy_buffer_size = 64 * 1024
    dest = tmp_path / "out"
    fs.extract(path, str(dest))
    assert (dest / "blob.bin").read_bytes() == content


def make_hardlinked_tar(tmp_path, ext):
    """Tar a tree where b.txt and sub/c.txt are hard links of a.txt, the way tar stores them."""
    src = tmp_path / "tree"
    (src / "sub").mkdir(parents=True)
    (src / "a.txt").write_bytes(b"shared content")
    os.link(str(src / "a.txt"), str(src / "b.txt"))
    os.link(str(src / "a.txt"), str(src / "sub" / "c.txt"))
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w") as tar:
        for name in ("a.txt", "b.txt", "sub", "sub/c.txt"):
            tar.add(str(src / name), arcname=name, recursive=False)
    compress, _ = CODECS[ext]
    path = tmp_path / f"links.{ext}"
    path.write_bytes(compress(buf.getvalue()))
    return str(path)


@pytest.mark.parametrize("ext", ["tar", "tar.gz", "tar.zst"])
def test_hard_links_are_files(fs, tmp_path, ext):
    path = make_hardlinked_tar(tmp_path, ext)
    listing = fs.list(path)
    assert [(e.name, e.entry_type, e.size) for e in listing.entries] == [
        ("sub", EntryType.DIRECTORY, 0),
        ("a.txt", EntryType.FILE, 14),
        ("b.txt", EntryType.FILE, 14),
    ]
    assert [e.name for e in fs.list(path, "sub").entries] == ["c.txt"]
    assert fs.read(path, "b.txt") == b"shared content"
    assert fs.read(path, "sub/c.txt") == b"shared content"


def test_hard_links_extract(fs, tmp_path):
    path = make_hardlinked_tar(tmp_path, "tar.bz2")
    dest = tmp_path / "out"
    written = fs.extract(path, str(dest))
    assert os.path.join(str(dest), "b.txt") in written
    for name in ("a.txt", "b.txt", "sub/c.txt"):
        assert (dest / name).read_bytes() == b"shared content"


def test_hard_link_selected_without_target(fs, tmp_path):
    path = make_hardlinked_tar(tmp_path, "tgz")
    dest = tmp_path / "out"
    assert fs.extract(path, str(dest), ["sub"]) == [
        os.path.join(str(dest), "sub"),
        os.path.join(str(dest), "sub", "c.txt"),
    ]
    assert (dest / "sub" / "c.txt").read_bytes() == b"shared content"
    assert not (dest / "a.txt").exists()


def test_hard_link_with_missing_target(fs, tmp_path):
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w") as tar:
        link = tarfile.TarInfo("orphan.txt")
        link.type = tarfile.LNKTYPE
        link.linkname = "gone.txt"
        tar.addfile(link)
    path = tmp_path / "orphan.tar"
    path.write_bytes(buf.getvalue())
    assert [(e.name, e.size) for e in fs.list(str(path)).entries] == [("orphan.txt", 0)]
    with pytest.raises(EntryNotFound):
        fs.read(str(path), "orphan.txt")


def test_corrupt_bzip2_data(fs, tmp_path):
    path = tmp_path / "bad.tar.bz2"
    path.write_bytes(b"BZh9" + b"\x00" * 200)
    with pytest.raises(NotAValidArchive):
        fs.list(str(path))
