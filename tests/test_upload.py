"""
Tests for file upload and download.
"""

import io
import json

import httpx
import pytest
from pytest_httpx import HTTPXMock, IteratorStream

from gett.exceptions import NotFoundError, ProtocolError, RemoteError, UploadError

from conftest import ACCESS_TOKEN, BASE_URL, LOGIN_URL, SHARE_PAYLOAD


PUT_URL = "https://blobs.ge.tt/928PBdA/2?sig=abc123"
CREATE_URL = f"{BASE_URL}/files/928PBdA/create?accesstoken={ACCESS_TOKEN}"


def created_file(**overrides) -> dict:
    payload = {
        "filename": "notes.txt",
        "fileid": 2,
        "created": 1322847700,
        "downloads": 0,
        "readystate": "remote",
        "getturl": "http://ge.tt/928PBdA/v/2",
        "upload": {
            "puturl": PUT_URL,
            "posturl": "https://blobs.ge.tt/928PBdA/2/post?sig=abc123",
        },
    }
    payload.update(overrides)
    return payload


class TestUploadFile:
    """Test the two-phase upload."""

    def test_upload_from_path(self, client, mock_login: HTTPXMock, tmp_path):
        """Test registering a file and sending its contents."""
        test_file = tmp_path / "notes.txt"
        test_file.write_bytes(b"Hello, World!")
        mock_login.add_response(url=CREATE_URL, method="POST", json=created_file())
        mock_login.add_response(url=PUT_URL, method="PUT", status_code=201)

        result = client.upload_file(str(test_file), sharename="928PBdA")

        assert result.fileid == "2"
        assert result.sharename == "928PBdA"
        assert result.is_remote
        assert result.put_upload_url == PUT_URL
        assert result.url == "http://ge.tt/928PBdA/v/2"

        create_request = mock_login.get_requests(url=CREATE_URL)[0]
        assert json.loads(create_request.content) == {"filename": str(test_file)}
        assert mock_login.get_requests(url=PUT_URL)[0].content == b"Hello, World!"
        assert len(mock_login.get_requests(url=LOGIN_URL)) == 1

    def test_upload_creates_share(self, client, mock_login: HTTPXMock):
        """Test that a share is created when none is given."""
        mock_login.add_response(
            url=f"{BASE_URL}/shares/create?accesstoken={ACCESS_TOKEN}",
            method="POST",
            json={"sharename": "928PBdA", "created": 1322847473, "title": "Notes"},
        )
        mock_login.add_response(url=CREATE_URL, method="POST", json=created_file())
        mock_login.add_response(url=PUT_URL, method="PUT")

        result = client.upload_file("notes.txt", title="Notes", contents=b"some notes")

        assert result.sharename == "928PBdA"
        assert client.shares("928PBdA")[0].title == "Notes"
        assert len(mock_login.get_requests(url=LOGIN_URL)) == 1

    def test_upload_from_stream_with_encoding(self, client, mock_login: HTTPXMock):
        """Test that encoded text is sent as UTF-8."""
        mock_login.add_response(url=CREATE_URL, method="POST", json=created_file())
        mock_login.add_response(url=PUT_URL, method="PUT")

        client.upload_file(
            "notes.txt",
            sharename="928PBdA",
            contents=io.BytesIO("café".encode("latin-1")),
            encoding="latin-1",
        )

        assert mock_login.get_requests(url=PUT_URL)[0].content == "café".encode("utf-8")

    def test_upload_wrong_readystate(self, client, mock_login: HTTPXMock):
        """Test that a file not awaiting upload aborts before the PUT."""
        mock_login.add_response(url=CREATE_URL, method="POST", json=created_file(readystate="uploaded"))

        with pytest.raises(ProtocolError, match="/files/928PBdA/create"):
            client.upload_file("notes.txt", sharename="928PBdA", contents=b"data")
        assert [r.method for r in mock_login.get_requests()] == ["POST", "POST"]

    def test_upload_missing_put_url(self, client, mock_login: HTTPXMock):
        """Test that a missing put URL aborts before the PUT."""
        mock_login.add_response(url=CREATE_URL, method="POST", json=created_file(upload={"posturl": "x"}))

        with pytest.raises(ProtocolError, match="put upload URL"):
            client.upload_file("notes.txt", sharename="928PBdA", contents=b"data")
        assert [r.method for r in mock_login.get_requests()] == ["POST", "POST"]

    def test_upload_unreadable_file(self, client, mock_login: HTTPXMock, tmp_path):
        """Test that unreadable contents raise UploadError naming the source."""
        mock_login.add_response(url=CREATE_URL, method="POST", json=created_file())
        missing = tmp_path / "missing.txt"

        with pytest.raises(UploadError, match="missing.txt"):
            client.upload_file("notes.txt", sharename="928PBdA", contents=missing)

    def test_upload_put_rejected(self, client, mock_login: HTTPXMock):
        """Test that a refused PUT raises RemoteError."""
        mock_login.add_response(url=CREATE_URL, method="POST", json=created_file())
        mock_login.add_response(url=PUT_URL, method="PUT", status_code=500)

        with pytest.raises(RemoteError, match="PUT"):
            client.upload_file("notes.txt", sharename="928PBdA", contents=b"data")


class TestSendFile:
    """Test sending raw contents."""

    def test_send_empty_contents(self, client, httpx_mock: HTTPXMock):
        """Test that empty contents are refused without a request."""
        assert client.send_file(PUT_URL, b"") is False
        assert httpx_mock.get_requests() == []

    def test_send_bytes(self, client, httpx_mock: HTTPXMock):
        """Test sending an in-memory buffer."""
        httpx_mock.add_response(url=PUT_URL, method="PUT")

        assert client.send_file(PUT_URL, b"\x00\x01binary") is True
        assert httpx_mock.get_requests()[0].content == b"\x00\x01binary"


class TestUploadUrl:
    """Test requesting a new upload URL."""

    def test_get_new_upload_url(self, client, mock_login: HTTPXMock):
        """Test that the put URL is returned."""
        mock_login.add_response(
            url=f"{BASE_URL}/files/928PBdA/2/upload?accesstoken={ACCESS_TOKEN}",
            json={"puturl": PUT_URL, "posturl": "https://blobs.ge.tt/post"},
        )

        assert client.get_new_upload_url("928PBdA", 2) == PUT_URL
        assert len(mock_login.get_requests(url=LOGIN_URL)) == 1

    def test_get_new_upload_url_missing(self, client, mock_login: HTTPXMock):
        """Test that a response without a put URL is a protocol error."""
        mock_login.add_response(
            url=f"{BASE_URL}/files/928PBdA/2/upload?accesstoken={ACCESS_TOKEN}",
            json={"posturl": "https://blobs.ge.tt/post"},
        )

        with pytest.raises(ProtocolError, match="put upload URL"):
            client.get_new_upload_url("928PBdA", 2)


class TestFiles:
    """Test file metadata and removal."""

    def test_get_file(self, client, httpx_mock: HTTPXMock):
        """Test fetching file metadata without logging in."""
        httpx_mock.add_response(
            url=f"{BASE_URL}/files/928PBdA/1",
            json={
                "filename": "hello.txt",
                "fileid": "1",
                "size": 12,
                "created": 1322847473,
                "downloads": 3,
                "readystate": "uploaded",
                "getturl": "http://ge.tt/928PBdA/v/1",
                "downloadurl": "http://open.ge.tt/1/files/928PBdA/1/blob?download",
            },
        )

        f = client.get_file("928PBdA", 1)

        assert f.filename == "hello.txt"
        assert f.downloads == 3
        assert f.sharename == "928PBdA"
        assert f.download.endswith("blob?download")
        assert not f.is_remote
        assert client.shares() == []

    def test_destroy_file(self, client, mock_login: HTTPXMock):
        """Test deleting a file."""
        mock_login.add_response(
            url=f"{BASE_URL}/files/928PBdA/1/destroy?accesstoken={ACCESS_TOKEN}",
            method="POST",
            json={},
        )

        assert client.destroy_file("928PBdA", 1) is True
        assert len(mock_login.get_requests(url=LOGIN_URL)) == 1

    def test_destroy_file_empty_response(self, client, mock_login: HTTPXMock):
        """Test that an empty response is a soft failure."""
        mock_login.add_response(
            url=f"{BASE_URL}/files/928PBdA/1/destroy?accesstoken={ACCESS_TOKEN}",
            method="POST",
            content=b"",
        )

        assert client.destroy_file("928PBdA", 1) is False


class TestDownload:
    """Test content retrieval."""

    def test_get_file_contents(self, client, httpx_mock: HTTPXMock):
        """Test that blob contents match the file size."""
        httpx_mock.add_response(url=f"{BASE_URL}/shares/928PBdA", json=SHARE_PAYLOAD)
        httpx_mock.add_response(url=f"{BASE_URL}/files/928PBdA/1/blob", content=b"Hello world\n")

        share = client.get_share("928PBdA")
        contents = client.get_file_contents("928PBdA", 1)

        assert len(contents) == share.file(1).size
        assert b"Hello world" in contents

    def test_get_thumbnail(self, client, httpx_mock: HTTPXMock):
        """Test fetching a thumbnail verbatim."""
        httpx_mock.add_response(url=f"{BASE_URL}/files/928PBdA/0/blob/thumb", content=b"\x89PNG thumb")

        assert client.get_thumbnail("928PBdA", 0) == b"\x89PNG thumb"

    def test_get_scaled_contents(self, client, httpx_mock: HTTPXMock):
        """Test that the requested size is sent as WxH."""
        httpx_mock.add_response(url=f"{BASE_URL}/files/928PBdA/0/blob/scale?size=640x480", content=b"scaled")

        assert client.get_scaled_contents("928PBdA", 0, 640, 480) == b"scaled"

    def test_get_file_contents_not_found(self, client, httpx_mock: HTTPXMock):
        """Test that a missing blob raises NotFoundError."""
        httpx_mock.add_response(url=f"{BASE_URL}/files/928PBdA/9/blob", status_code=404)

        with pytest.raises(NotFoundError):
            client.get_file_contents("928PBdA", 9)

    def test_download_file(self, client, httpx_mock: HTTPXMock, tmp_path):
        """Test streaming a file to disk."""
        httpx_mock.add_response(url=f"{BASE_URL}/files/928PBdA/1/blob", content=b"Hello world\n")
        dest_file = tmp_path / "nested" / "hello.txt"

        result = client.download_file("928PBdA", 1, dest_file)

        assert result == dest_file.resolve()
        assert dest_file.read_bytes() == b"Hello world\n"

    def test_download_to_file_object(self, client, httpx_mock: HTTPXMock):
        """Test streaming a file into a buffer."""
        httpx_mock.add_response(url=f"{BASE_URL}/files/928PBdA/1/blob", content=b"Hello world\n")
        buffer = io.BytesIO()

        result = client.download_file("928PBdA", 1, buffer)

        assert result is None
        assert buffer.getvalue() == b"Hello world\n"

    def test_download_interrupted_removes_partial_file(self, client, httpx_mock: HTTPXMock, tmp_path):
        """Test that a connection lost mid-download leaves no file behind."""

        def chunks():
            yield b"Hello"
            raise httpx.ReadError("connection reset")

        httpx_mock.add_response(url=f"{BASE_URL}/files/928PBdA/1/blob", stream=IteratorStream(chunks()))
        dest_file = tmp_path / "hello.txt"

        with pytest.raises(RemoteError, match="connection reset"):
            client.download_file("928PBdA", 1, dest_file)
        assert not dest_file.exists()

    def test_download_not_found_creates_no_file(self, client, httpx_mock: HTTPXMock, tmp_path):
        """Test that a missing blob does not create the destination."""
        httpx_mock.add_response(url=f"{BASE_URL}/files/928PBdA/9/blob", status_code=404)
        dest_file = tmp_path / "missing.txt"

        with pytest.raises(NotFoundError):
            client.download_file("928PBdA", 9, dest_file)
        assert not dest_file.exists()
