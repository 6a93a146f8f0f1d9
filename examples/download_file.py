#!/usr/bin/env python3
"""
File download example.

This example demonstrates looking up a share and downloading one of its files.
GETT_API_KEY, GETT_EMAIL and GETT_PASSWORD must be set to build the client,
but reading a share and its contents does not log in.
"""

import sys
from pathlib import Path

from gett import GettClient
from gett.exceptions import NotFoundError


def format_size(size_bytes: int) -> str:
    """Format byte size to human readable string."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} TB"


def main():
    if len(sys.argv) < 3:
        print("Usage: python download_file.py <sharename> <fileid> [destination]")
        sys.exit(1)

    sharename = sys.argv[1]
    fileid = sys.argv[2]
    destination = sys.argv[3] if len(sys.argv) > 3 else None

    with GettClient.from_env() as client:
        try:
            share = client.get_share(sharename)
        except NotFoundError:
            print("Error: Share not found.")
            sys.exit(1)

        f = share.file(fileid) if share else None
        if f is None:
            print(f"Error: No file {fileid} in share {sharename}.")
            sys.exit(1)

        print(f"\nFile: {f.filename}")
        if f.size is not None:
            print(f"Size: {format_size(f.size)}")
        if f.is_remote:
            print("Error: The file has not finished uploading.")
            sys.exit(1)

        dest_path = Path(destination or f.filename)
        if dest_path.exists():
            response = input(f"\n{dest_path} already exists. Overwrite? [y/N] ")
            if response.lower() != "y":
                print("Cancelled.")
                sys.exit(0)

        print(f"\nDownloading to {dest_path}...")
        saved = client.download_file(sharename, fileid, dest_path)

        print("\nDownload complete!")
        print(f"Saved to: {saved}")


if __name__ == "__main__":
    main()
