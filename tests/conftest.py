"""
Shared fixtures for Gett client tests.
"""

import pytest
from pytest_httpx import HTTPXMock

from gett import GettClient


BASE_URL = "https://open.ge.tt/1"
ACCESS_TOKEN = "r.abc-123_XYZ"
LOGIN_URL = f"{BASE_URL}/users/login"

USER_PAYLOAD = {
    "userid": "user-1234",
    "fullname": "Mark Allen",
    "email": "me@example.com",
    "storage": {"used": 1024, "limit": 2147483648, "extra": 0},
}

SHARE_PAYLOAD = {
    "sharename": "928PBdA",
    "created": 1322847473,
    "title": "Test Share",
    "files": [
        {"filename": "hello.c", "fileid": 0, "created": 1322847473, "size": 13},
        {"filename": "hello.txt", "fileid": 1, "created": 1322847473, "size": 12},
    ],
}


def login_payload(token: str = ACCESS_TOKEN) -> dict:
    return {
        "accesstoken": token,
        "expires": 86400,
        "refreshtoken": "r.refresh-456",
        "user": USER_PAYLOAD,
    }


@pytest.fixture
def client():
    with GettClient(
        api_key="apitestkey123",
        email="me@example.com",
        password="mysecret",
    ) as client:
        yield client


@pytest.fixture
def mock_login(httpx_mock: HTTPXMock):
    """Register a successful login response."""
    httpx_mock.add_response(url=LOGIN_URL, method="POST", json=login_payload())
    return httpx_mock
