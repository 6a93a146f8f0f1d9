"""
Gett Client

Main client class for interacting with the Gett API.
"""

import logging
import os
import re
from numbers import Number
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Mapping, Optional, Union

import httpx

from gett.config import GettConfig
from gett.exceptions import DownloadError, ProtocolError, RemoteError, UploadError, ValidationError
from gett.mappers import build_file, build_share, build_user, parse_record
from gett.models import READYSTATE_REMOTE, Credentials, File, Share, Token, User
from gett.transport import Transport, TOKEN_PARAM
from gett.wire import LoginRecord, UploadRecord


logger = logging.getLogger(__name__)

# Regex for validating share names before they are put in a URL path
SHARENAME_PATTERN = re.compile(r"[A-Za-z0-9_-]+")

Contents = Union[str, Path, bytes, BinaryIO]


def _is_empty(payload: Any) -> bool:
    """True for the bodies the service sends when there is nothing to report."""
    return payload is None or payload is False or payload in ("", "0") or (
        isinstance(payload, Number) and payload == 0
    )


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, Number):
        return True
    try:
        float(value)
    except (TypeError, ValueError):
        return False
    return True


class GettClient:
    """
    Gett API client.

    Holds the account credentials, the current access token, the last
    fetched user snapshot and a cache of shares keyed by share name.
    Operations that need a token log in first when none is held; a held
    token is never refreshed.

    Example:
        >>> client = GettClient(
        ...     api_key="myapikey",
        ...     email="me@example.com",
        ...     password="mysecret",
        ... )
        >>> f = client.upload_file("/some/path/name.txt", title="My Awesome File")
        >>> print(f"Available at {f.url}")
    """

    def __init__(
        self,
        api_key: str,
        email: str,
        password: str,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        config: Optional[GettConfig] = None,
        http_client: Optional[httpx.Client] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Initialize Gett client.

        Args:
            api_key: Application API key (alphanumeric)
            email: Account email address
            password: Account password
            base_url: API root (default: https://open.ge.tt/1)
            timeout: Request timeout in seconds
            config: Full configuration; base_url and timeout override it
            http_client: Pre-built httpx client to send requests with
            transport: httpx transport for the client created internally

        Raises:
            ValidationError: If any credential is malformed
        """
        self._credentials = Credentials.parse(api_key, email, password)

        overrides: Dict[str, Any] = {}
        if base_url is not None:
            overrides["base_url"] = base_url
        if timeout is not None:
            overrides["timeout"] = timeout
        config = config or GettConfig()
        if overrides:
            config = GettConfig(**{**config.model_dump(), **overrides})
        self._config = config

        self._transport = Transport(config, http_client=http_client, transport=transport)
        self._token: Optional[Token] = None
        self._user: Optional[User] = None
        self._shares: Dict[str, Share] = {}

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **kwargs: Any) -> "GettClient":
        """
        Create a client from GETT_API_KEY, GETT_EMAIL and GETT_PASSWORD.

        GETT_BASE_URL and GETT_TIMEOUT are honoured through GettConfig.from_env.

        Raises:
            ValidationError: If a credential variable is missing or malformed
        """
        env = os.environ if environ is None else environ
        missing = [name for name in ("GETT_API_KEY", "GETT_EMAIL", "GETT_PASSWORD") if not env.get(name)]
        if missing:
            raise ValidationError(f"Missing environment variables: {', '.join(missing)}")
        kwargs.setdefault("config", GettConfig.from_env(env))
        return cls(env["GETT_API_KEY"], env["GETT_EMAIL"], env["GETT_PASSWORD"], **kwargs)

    def __repr__(self) -> str:
        """String representation with redacted credentials."""
        token_display = "***" if self._token else "None"
        return (
            f"GettClient(base_url={self.base_url!r}, "
            f"email={self.email!r}, access_token={token_display})"
        )

    def close(self) -> None:
        """Close the HTTP client connection."""
        self._transport.close()

    def __enter__(self) -> "GettClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    # ==================== Session state ====================

    @property
    def config(self) -> GettConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def api_key(self) -> str:
        return self._credentials.api_key

    @property
    def email(self) -> str:
        return self._credentials.email

    @property
    def has_access_token(self) -> bool:
        return self._token is not None

    @property
    def access_token(self) -> Optional[str]:
        """Current access token (do not log this value)."""
        return self._token.access_token if self._token else None

    @property
    def access_token_expiration(self) -> Optional[float]:
        """Expiration of the access token in seconds since the epoch."""
        return self._token.expires_at if self._token else None

    @property
    def refresh_token(self) -> Optional[str]:
        return self._token.refresh_token if self._token else None

    @property
    def user(self) -> Optional[User]:
        """User snapshot from the last login or my_user_data call."""
        return self._user

    def _auth_params(self) -> Dict[str, str]:
        """Query parameters carrying the access token, logging in if none is held."""
        if self._token is None:
            self.login()
        if self._token is None:
            raise ProtocolError("Login returned an empty response; no access token available")
        return {TOKEN_PARAM: self._token.access_token}

    # ==================== Users ====================

    def login(self) -> Optional[Dict[str, Any]]:
        """
        Log in with the configured credentials.

        Sets the access token, its expiration, the refresh token and the
        user snapshot together.

        Returns:
            The decoded login response, or None if the service sent nothing

        Raises:
            RemoteError: If the service rejects the request
            ProtocolError: If the response lacks the access token
            ValidationError: If the token or its lifetime is malformed
        """
        credentials = self._credentials
        response = self._transport.send(
            "POST",
            "/users/login",
            {
                "apikey": credentials.api_key,
                "email": credentials.email,
                "password": credentials.password,
            },
        )
        if _is_empty(response):
            return None

        record = parse_record(LoginRecord, response)
        token = Token.issue(record.accesstoken, record.expires, record.refreshtoken)
        user = build_user(record.user)

        self._token = token
        self._user = user
        logger.info("Logged in as %s", credentials.email)
        return response

    def my_user_data(self) -> Optional[User]:
        """
        Fetch the current user's account data.

        Returns:
            The refreshed User snapshot, or None if the service sent nothing
        """
        params = self._auth_params()
        response = self._transport.send("GET", "/users/me", params=params)
        if _is_empty(response):
            return None

        self._user = build_user(response)
        return self._user

    # ==================== Shares ====================

    def get_shares(self, offset: Optional[int] = None, limit: Optional[int] = None) -> Optional[List[Share]]:
        """
        Fetch all shares of the account and cache them.

        Args:
            offset: Number of shares to skip
            limit: Maximum number of shares to return

        Returns:
            All cached shares after the fetch, or None if the service sent nothing
        """
        params: Dict[str, Any] = self._auth_params()
        if offset and _is_number(offset):
            params["skip"] = offset
        if limit and _is_number(limit):
            params["limit"] = limit

        response = self._transport.send("GET", "/shares", params=params)
        if _is_empty(response):
            return None
        if not isinstance(response, list):
            raise ProtocolError(f"GET /shares returned {type(response).__name__}, expected a list")

        for share_payload in response:
            if not share_payload:
                continue
            self.add_share(build_share(share_payload))
        return self.shares()

    def get_share(self, name: str) -> Optional[Share]:
        """
        Fetch a single share by name and cache it.

        No access token is needed. An empty or malformed name returns None
        without contacting the service.
        """
        if not name or not SHARENAME_PATTERN.fullmatch(name):
            return None

        response = self._transport.send("GET", f"/shares/{name}")
        if _is_empty(response):
            return None

        share = build_share(response)
        self.add_share(share)
        return share

    def create_share(self, title: Optional[str] = None) -> Optional[Share]:
        """
        Create a new share.

        Args:
            title: Optional share title

        Returns:
            The new Share, or None if the service sent nothing
        """
        params = self._auth_params()
        data = {"title": title} if title else None
        response = self._transport.send("POST", "/shares/create", data, params=params)
        if _is_empty(response):
            return None

        share = build_share(response)
        self.add_share(share)
        logger.info("Created share %s", share.sharename)
        return share

    def update_share(self, name: str, title: Optional[str] = None) -> Optional[Share]:
        """
        Set or clear the title of a share.

        Passing ``title=None`` removes any existing title.

        Returns:
            The updated Share, or None if the service sent nothing
        """
        params = self._auth_params()
        response = self._transport.send("POST", f"/shares/{name}/update", {"title": title}, params=params)
        if _is_empty(response):
            return None

        share = build_share(response)
        self.add_share(share)
        return share

    def destroy_share(self, name: str) -> bool:
        """
        Delete a share and everything in it.

        Returns:
            True if the share was destroyed and dropped from the cache,
            False if the service sent an empty response
        """
        params = self._auth_params()
        response = self._transport.send("POST", f"/shares/{name}/destroy", params=params)
        if _is_empty(response):
            return False

        self._shares.pop(name, None)
        logger.info("Destroyed share %s", name)
        return True

    # ==================== Share cache ====================

    def add_share(self, share: Any) -> Optional[Share]:
        """Insert or replace a share in the cache; anything else is ignored."""
        if not isinstance(share, Share):
            return None
        self._shares[share.sharename] = share
        return share

    def shares(self, *names: str) -> List[Optional[Share]]:
        """
        Look up cached shares.

        With no arguments returns every cached share in no particular order.
        With names returns one entry per name, in the order given, None for
        names that are not cached.
        """
        if names:
            return [self._shares.get(name) for name in names]
        return list(self._shares.values())

    # ==================== Files ====================

    def get_file(self, sharename: str, fileid: Union[int, str]) -> Optional[File]:
        """Fetch metadata of a single file. No access token is needed."""
        response = self._transport.send("GET", f"/files/{sharename}/{fileid}")
        if _is_empty(response):
            return None
        return build_file(response, sharename=sharename)

    def destroy_file(self, sharename: str, fileid: Union[int, str]) -> bool:
        """
        Delete a file from a share.

        Returns:
            True on success, False if the service sent an empty response
        """
        params = self._auth_params()
        response = self._transport.send("POST", f"/files/{sharename}/{fileid}/destroy", params=params)
        return not _is_empty(response)

    def get_new_upload_url(self, sharename: str, fileid: Union[int, str]) -> str:
        """
        Request a fresh upload URL for an existing file.

        Returns:
            URL to PUT the file contents to

        Raises:
            ProtocolError: If the response carries no put URL
        """
        params = self._auth_params()
        endpoint = f"/files/{sharename}/{fileid}/upload"
        response = self._transport.send("GET", endpoint, params=params)
        record = parse_record(UploadRecord, response) if isinstance(response, dict) else None
        if record is None or not record.puturl:
            raise ProtocolError(f"GET {endpoint} did not return a put upload URL")
        return record.puturl

    # ==================== File Upload ====================

    def upload_file(
        self,
        filename: str,
        sharename: Optional[str] = None,
        title: Optional[str] = None,
        contents: Optional[Contents] = None,
        encoding: Optional[str] = None,
    ) -> File:
        """
        Register a file in a share and upload its contents.

        The file record is created first; the contents are then PUT to the
        upload URL the service hands out. The returned File reflects the
        registration, so ``size`` and ``download`` are not populated yet.

        Args:
            filename: Name of the file in the share; also the local path to
                read when ``contents`` is not given
            sharename: Share to upload into (a new share is created if omitted)
            title: Title for the new share when ``sharename`` is omitted
            contents: Local path, bytes or binary file object to upload
            encoding: Text encoding of the contents (default: binary)

        Returns:
            The newly registered File

        Raises:
            ProtocolError: If the service does not hand out a usable upload URL
            UploadError: If the contents could not be read or were empty
            RemoteError: If either request fails
        """
        if not sharename:
            share = self.create_share(title)
            if share is None:
                raise ProtocolError("POST /shares/create returned an empty response")
            sharename = share.sharename

        params = self._auth_params()
        endpoint = f"/files/{sharename}/create"
        response = self._transport.send("POST", endpoint, {"filename": filename}, params=params)
        if _is_empty(response):
            raise ProtocolError(f"POST {endpoint} returned an empty response")

        if contents is None:
            contents = filename

        file = build_file(response, sharename=sharename)
        if file.readystate != READYSTATE_REMOTE:
            raise ProtocolError(
                f"POST {endpoint} returned readystate {file.readystate!r}, expected {READYSTATE_REMOTE!r}"
            )
        if not file.put_upload_url:
            raise ProtocolError(f"POST {endpoint} did not return a put upload URL")

        if not self.send_file(file.put_upload_url, contents, encoding):
            raise UploadError(f"Could not upload contents of {self._describe(contents)}")
        logger.info("Uploaded %s to share %s as file %s", filename, sharename, file.fileid)
        return file

    def send_file(self, url: str, contents: Contents, encoding: Optional[str] = None) -> bool:
        """
        PUT file contents to an upload URL.

        Args:
            url: Upload URL from a file create or upload URL response
            contents: Local path, bytes or binary file object
            encoding: Text encoding of the contents; the text is sent as
                UTF-8. Without an encoding the bytes are sent unchanged.

        Returns:
            True once uploaded, False if the contents were unreadable or empty
        """
        try:
            data = self._read_contents(contents, encoding)
        except (OSError, UnicodeError, LookupError) as e:
            logger.warning("Could not read %s: %s", self._describe(contents), e)
            return False

        if not data:
            logger.warning("Refusing to upload empty contents from %s", self._describe(contents))
            return False

        self._transport.put(url, data)
        return True

    @staticmethod
    def _read_contents(contents: Contents, encoding: Optional[str]) -> bytes:
        if isinstance(contents, (str, Path)):
            data = Path(contents).read_bytes()
        elif isinstance(contents, (bytes, bytearray)):
            data = bytes(contents)
        else:
            data = contents.read()
        if encoding:
            if isinstance(data, bytes):
                data = data.decode(encoding)
            return data.encode("utf-8")
        if isinstance(data, str):
            raise UnicodeError("text contents need an encoding")
        return data

    @staticmethod
    def _describe(contents: Contents) -> str:
        if isinstance(contents, (str, Path)):
            return str(contents)
        if isinstance(contents, (bytes, bytearray)):
            return "in-memory buffer"
        return str(getattr(contents, "name", "stream"))

    # ==================== File Download ====================

    def get_file_contents(self, sharename: str, fileid: Union[int, str]) -> bytes:
        """Return the raw contents of a file."""
        return self._transport.get_bytes(f"/files/{sharename}/{fileid}/blob")

    def get_thumbnail(self, sharename: str, fileid: Union[int, str]) -> bytes:
        """Return the thumbnail image of a file."""
        return self._transport.get_bytes(f"/files/{sharename}/{fileid}/blob/thumb")

    def get_scaled_contents(self, sharename: str, fileid: Union[int, str], width: int, height: int) -> bytes:
        """Return an image file scaled to fit ``width`` x ``height``."""
        return self._transport.get_bytes(
            f"/files/{sharename}/{fileid}/blob/scale",
            params={"size": f"{width}x{height}"},
        )

    def download_file(
        self,
        sharename: str,
        fileid: Union[int, str],
        destination: Union[str, Path, BinaryIO],
    ) -> Optional[Path]:
        """
        Stream the contents of a file to a local path or file object.

        A file created for a path destination is removed again if the
        download fails partway.

        Args:
            sharename: Share holding the file
            fileid: File id within the share
            destination: Destination file path or writable binary file object

        Returns:
            Path to downloaded file, or None for a file object without a
            file name

        Raises:
            RemoteError: If the service refuses the download
            DownloadError: If the contents cannot be written locally
        """
        dest_path: Optional[Path] = None
        created = False
        try:
            with self._transport.stream(f"/files/{sharename}/{fileid}/blob") as response:
                if isinstance(destination, (str, Path)):
                    dest_path = Path(destination).resolve()
                    try:
                        dest_path.parent.mkdir(parents=True, exist_ok=True)
                        file_obj: BinaryIO = open(dest_path, "wb")  # type: ignore
                    except OSError as e:
                        raise DownloadError(f"Cannot write {dest_path}: {e}") from e
                    created = True
                    should_close = True
                else:
                    file_obj = destination
                    name = getattr(file_obj, "name", None)
                    dest_path = Path(name) if isinstance(name, (str, Path)) else None
                    should_close = False

                try:
                    for chunk in response.iter_bytes(chunk_size=65536):
                        file_obj.write(chunk)
                except OSError as e:
                    raise DownloadError(f"Cannot write {dest_path or 'stream'}: {e}") from e
                finally:
                    if should_close:
                        file_obj.close()
        except (DownloadError, RemoteError):
            if created and dest_path is not None:
                dest_path.unlink(missing_ok=True)
                logger.warning("Removed partial download %s", dest_path)
            raise

        return dest_path
