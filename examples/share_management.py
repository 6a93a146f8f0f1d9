#!/usr/bin/env python3
"""
Share management example.

This example demonstrates listing, retitling, and destroying shares.
"""

import sys

from gett import GettClient
from gett.exceptions import AuthenticationError


def list_shares(client: GettClient):
    """List all shares."""
    print("\n=== Your Shares ===\n")

    shares = client.get_shares() or []
    if not shares:
        print("No shares found.")
        return

    for share in sorted(shares, key=lambda s: s.created or 0):
        print(f"Share: {share.sharename}")
        print(f"  Title: {share.title or '(none)'}")
        for f in share.files:
            print(f"  - [{f.fileid}] {f.filename} ({f.readystate}, {f.downloads or 0} downloads)")
        print()


def main():
    if len(sys.argv) < 2:
        print("Usage: python share_management.py <command> [args]")
        print("\nCommands:")
        print("  list                    - List all your shares")
        print("  me                      - Show account storage usage")
        print("  title <share> [title]   - Set or clear a share title")
        print("  destroy <share>         - Delete a share")
        print("  rmfile <share> <id>     - Delete a file")
        sys.exit(1)

    command = sys.argv[1].lower()

    try:
        with GettClient.from_env() as client:
            if command == "list":
                list_shares(client)

            elif command == "me":
                user = client.my_user_data()
                print(f"{user.fullname} <{user.email}>")
                print(f"Storage: {user.storage_used} of {user.storage_limit} bytes")

            elif command == "title":
                if len(sys.argv) < 3:
                    print("Usage: python share_management.py title <share> [title]")
                    sys.exit(1)
                title = sys.argv[3] if len(sys.argv) > 3 else None
                share = client.update_share(sys.argv[2], title)
                print(f"Title is now: {share.title or '(none)'}")

            elif command == "destroy":
                if len(sys.argv) < 3:
                    print("Usage: python share_management.py destroy <share>")
                    sys.exit(1)
                if client.destroy_share(sys.argv[2]):
                    print("Done!")
                else:
                    print("The service did not confirm the deletion.")
                    sys.exit(1)

            elif command == "rmfile":
                if len(sys.argv) < 4:
                    print("Usage: python share_management.py rmfile <share> <id>")
                    sys.exit(1)
                if client.destroy_file(sys.argv[2], sys.argv[3]):
                    print("Done!")
                else:
                    print("The service did not confirm the deletion.")
                    sys.exit(1)

            else:
                print(f"Unknown command: {command}")
                sys.exit(1)

    except AuthenticationError as e:
        print(f"Authentication error: {e}")
        print("Check GETT_API_KEY, GETT_EMAIL and GETT_PASSWORD.")
        sys.exit(1)


if __name__ == "__main__":
    main()
