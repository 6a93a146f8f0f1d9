"""
Gett SDK Data Models

Pydantic models for the entities the Gett service exposes: the account
credentials and session token held by the client, and the User, Share and
File objects built from API responses.
"""

import re
import time
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from gett.exceptions import ValidationError


READYSTATE_REMOTE = "remote"

API_KEY_PATTERN = re.compile(r"[A-Za-z0-9]+")
EMAIL_PATTERN = re.compile(r".+@.+")
TOKEN_PATTERN = re.compile(r"[\w.-]+")


def _first_error(exc: PydanticValidationError) -> str:
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error["loc"])
    return f"{field}: {error['msg']}" if field else error["msg"]


class Credentials(BaseModel):
    """Account credentials used by the login endpoint."""

    model_config = ConfigDict(frozen=True)

    api_key: str
    email: str
    password: str = Field(repr=False)

    @field_validator("api_key")
    @classmethod
    def _check_api_key(cls, value: str) -> str:
        if not API_KEY_PATTERN.fullmatch(value):
            raise ValueError(f"{value!r} is not alphanumeric")
        return value

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if not EMAIL_PATTERN.fullmatch(value):
            raise ValueError(f"{value!r} is not an email address")
        return value

    @field_validator("password")
    @classmethod
    def _check_password(cls, value: str) -> str:
        if not re.search(r"\w", value):
            raise ValueError("password must contain word characters")
        return value

    @classmethod
    def parse(cls, api_key: str, email: str, password: str) -> "Credentials":
        """Validate raw credentials, raising ValidationError on bad input."""
        try:
            return cls(api_key=api_key, email=email, password=password)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid credentials: {_first_error(e)}") from e


class Token(BaseModel):
    """Access token, its expiration instant and the refresh token, set as one unit."""

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(repr=False)
    expires_at: float = Field(description="Expiration as seconds since the epoch")
    refresh_token: Optional[str] = Field(default=None, repr=False)

    @field_validator("access_token", "refresh_token")
    @classmethod
    def _check_token(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not TOKEN_PATTERN.fullmatch(value):
            raise ValueError("token contains unexpected characters")
        return value

    @classmethod
    def issue(
        cls,
        access_token: str,
        ttl: Union[int, float, str],
        refresh_token: Optional[str] = None,
    ) -> "Token":
        """
        Create a token that expires ``ttl`` seconds from now.

        Raises:
            ValidationError: If the token is malformed or the TTL is not a number
        """
        if isinstance(ttl, bool):
            raise ValidationError(f"{ttl!r} is not a number")
        try:
            seconds = float(ttl)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"{ttl!r} is not a number") from e
        try:
            return cls(
                access_token=access_token,
                expires_at=time.time() + seconds,
                refresh_token=refresh_token,
            )
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid token: {_first_error(e)}") from e

    @property
    def expired(self) -> bool:
        return time.time() >= self.expires_at


class User(BaseModel):
    """Snapshot of the logged in account."""

    model_config = ConfigDict(frozen=True)

    userid: str
    fullname: Optional[str] = None
    email: Optional[str] = None
    storage_used: Optional[int] = None
    storage_limit: Optional[int] = None


class File(BaseModel):
    """
    A single file inside a share.

    ``put_upload_url`` and ``post_upload_url`` are only filled in from a
    file create response. While ``readystate`` is ``remote`` the bytes have
    not been uploaded yet and ``size`` / ``download`` are not meaningful.
    """

    model_config = ConfigDict(frozen=True)

    filename: str
    fileid: str
    size: Optional[int] = None
    created: Optional[int] = None
    downloads: Optional[int] = None
    readystate: Optional[str] = None
    url: Optional[str] = Field(default=None, description="Display URL")
    download: Optional[str] = Field(default=None, description="Direct download URL")
    sharename: Optional[str] = None
    put_upload_url: Optional[str] = None
    post_upload_url: Optional[str] = None

    @property
    def is_remote(self) -> bool:
        """True while the file is registered but its contents are not uploaded."""
        return self.readystate == READYSTATE_REMOTE


class Share(BaseModel):
    """A named container of files."""

    model_config = ConfigDict(frozen=True)

    sharename: str
    title: Optional[str] = None
    created: Optional[int] = None
    files: List[File] = Field(default_factory=list)

    def file(self, fileid: Union[int, str]) -> Optional[File]:
        """Return the file with the given id, if this share holds it."""
        for f in self.files:
            if f.fileid == str(fileid):
                return f
        return None
