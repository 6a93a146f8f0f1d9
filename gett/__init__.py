"""
Gett Python SDK

A Python client library for the Ge.tt file sharing service.

Example usage:
    from gett import GettClient

    client = GettClient(
        api_key="yourapikey",
        email="me@example.com",
        password="mysecret",
    )

    # Upload a file into a new share
    f = client.upload_file("document.pdf", title="My Documents")
    print(f"Available at: {f.url}")

    # Read it back
    data = client.get_file_contents(f.sharename, f.fileid)
"""

import logging

from gett.client import GettClient
from gett.config import GettConfig
from gett.exceptions import (
    GettError,
    ValidationError,
    RemoteError,
    AuthenticationError,
    NotFoundError,
    ProtocolError,
    UploadError,
    DownloadError,
)
from gett.models import (
    User,
    Share,
    File,
    Token,
    Credentials,
)
from gett.mappers import build_user, build_share, build_file

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "GettClient",
    "GettConfig",
    "GettError",
    "ValidationError",
    "RemoteError",
    "AuthenticationError",
    "NotFoundError",
    "ProtocolError",
    "UploadError",
    "DownloadError",
    "User",
    "Share",
    "File",
    "Token",
    "Credentials",
    "build_user",
    "build_share",
    "build_file",
]
