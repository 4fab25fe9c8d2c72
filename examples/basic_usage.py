#!/usr/bin/env python3
"""
arcvfs Example Script

This script demonstrates the basic usage of the arcvfs library.

Author: Tim Hosking
GitHub: https://github.com/Munger
"""

import argparse
import json
import os
import zipfile

from arcvfs import ArchiveError, ArchiveFS


def list_contents(fs, path, as_json=False):
    """List the direct children of a combined path like 'site.tar.gz/www'."""
    print(f"\nListing contents of: {path}")
    print("-" * 50)

    try:
        listing = fs.list_path(path)
    except (ArchiveError, ValueError) as e:
        print(f"Error: {e}")
        return

    if as_json:
        print(json.dumps(listing.to_dict(), indent=2))
        return
    for entry in listing.entries:
        if entry.is_dir:
            print(f"{entry.name}/")
        else:
            print(f"{entry.name} ({entry.size} bytes, {entry.compression})")
    print(f"Total: {listing.total_size} bytes in {len(listing.entries)} entries")


def read_file(fs, path):
    """Read and display the contents of a file inside an archive."""
    print(f"\nReading file: {path}")
    print("-" * 50)

    try:
        content = fs.read_path(path)
    except (ArchiveError, ValueError) as e:
        print(f"Error: {e}")
        return

    # Display the file content (limit to 500 bytes if too large)
    text = content.decode("utf-8", errors="replace")
    if len(content) > 500:
        print(text[:500] + "... (truncated)")
    else:
        print(text)


def extract_archive(fs, archive_path, target_dir, selection=None):
    """Extract an archive, or some paths of it, to a directory."""
    print(f"\nExtracting archive: {archive_path} to {target_dir}")
    print("-" * 50)

    try:
        written = fs.extract(archive_path, target_dir, selection)
    except ArchiveError as e:
        print(f"Error: {e}")
        return
    for path in written:
        print(path)
    print(f"Successfully extracted {len(written)} entries")


def show_formats(fs):
    """Print the formats this installation can open."""
    print("\nAvailable formats:")
    print("-" * 50)
    print(", ".join(fmt.value for fmt in fs.formats()))


def create_sample_archive(path):
    """Write a small ZIP to try the other commands on."""
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("file1.txt", "This is file 1 content")
        zf.writestr("file2.txt", "This is file 2 content")
        zf.writestr("subdir/file3.txt", "This is file 3 in a subdirectory")
    print(f"Created sample archive: {path}")


def main():
    """Main function demonstrating arcvfs features."""
    parser = argparse.ArgumentParser(description="arcvfs Example Script")
    parser.add_argument("--list", help="List contents of a path such as bundle.zip/subdir")
    parser.add_argument("--json", action="store_true", help="Print listings as JSON")
    parser.add_argument("--read", help="Read a file such as bundle.zip/subdir/file3.txt")
    parser.add_argument("--extract", nargs=2, metavar=("ARCHIVE", "TARGET_DIR"), help="Extract an archive")
    parser.add_argument("--only", nargs="*", default=None, help="Inner paths to extract")
    parser.add_argument("--formats", action="store_true", help="Show available formats")
    parser.add_argument("--debug", type=int, default=0, help="Debug level (0-4)")
    parser.add_argument("--demo", action="store_true", help="Run a full demonstration")

    args = parser.parse_args()

    fs = ArchiveFS()
    fs.config.debug_level = args.debug

    if args.list:
        list_contents(fs, args.list, args.json)
    elif args.read:
        read_file(fs, args.read)
    elif args.extract:
        extract_archive(fs, args.extract[0], args.extract[1], args.only)
    elif args.formats:
        show_formats(fs)
    elif args.demo:
        test_archive = "test_archive.zip"
        extract_dir = "extracted_files"

        create_sample_archive(test_archive)
        show_formats(fs)
        list_contents(fs, test_archive)
        list_contents(fs, f"{test_archive}/subdir", as_json=True)
        read_file(fs, f"{test_archive}/file1.txt")
        if not os.path.exists(extract_dir):
            os.makedirs(extract_dir)
        extract_archive(fs, test_archive, extract_dir, ["subdir"])

        print("\nDemonstration complete!")
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
