#!/usr/bin/env python3
"""
Simple file upload example.

This example demonstrates uploading a file into a new or existing share.
"""

import sys
from pathlib import Path

from gett import GettClient
from gett.exceptions import GettError


def main():
    # Check for file argument
    if len(sys.argv) < 2:
        print("Usage: python simple_upload.py <file_path> [sharename]")
        print("\nEnvironment variables:")
        print("  GETT_API_KEY  - Application API key (required)")
        print("  GETT_EMAIL    - Account email (required)")
        print("  GETT_PASSWORD - Account password (required)")
        print("  GETT_BASE_URL - API root (default: https://open.ge.tt/1)")
        sys.exit(1)

    file_path = Path(sys.argv[1])
    sharename = sys.argv[2] if len(sys.argv) > 2 else None
    if not file_path.exists():
        print(f"Error: File not found: {file_path}")
        sys.exit(1)

    print(f"Uploading {file_path.name}...")

    try:
        with GettClient.from_env() as client:
            result = client.upload_file(
                file_path.name,
                sharename=sharename,
                title=None if sharename else file_path.stem,
                contents=file_path,
            )
    except GettError as e:
        print(f"Upload failed: {e}")
        sys.exit(1)

    print(f"\nUpload successful!")
    print(f"  Share: {result.sharename}")
    print(f"  File id: {result.fileid}")
    print(f"  URL: {result.url}")


if __name__ == "__main__":
    main()
