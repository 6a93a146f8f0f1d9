"""
Gett SDK Exceptions

Custom exception classes for handling Gett API errors.
"""

from typing import Optional


class GettError(Exception):
    """Base exception for Gett SDK errors."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class ValidationError(GettError):
    """Raised when credentials or token data are malformed."""

    pass


class RemoteError(GettError):
    """
    Raised when the service answers with a non-success status.

    Carries the request method, the full URL and the status line so
    callers can report exactly which call failed.
    """

    def __init__(
        self,
        method: str,
        url: str,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> None:
        self.method = method
        self.url = url
        self.reason = reason
        if status_code is None:
            self.status_line = reason or "no response"
        else:
            self.status_line = f"{status_code} {reason or ''}".strip()
        super().__init__(f"{method} {url} said {self.status_line}", status_code)

    def __str__(self) -> str:
        return self.message


class AuthenticationError(RemoteError):
    """Raised when the service rejects the credentials or access token."""

    pass


class NotFoundError(RemoteError):
    """Raised when a share or file does not exist."""

    pass


class ProtocolError(GettError):
    """Raised when a successful response breaks the expected payload contract."""

    pass


class UploadError(GettError):
    """Raised when file contents could not be sent to the upload URL."""

    pass


class DownloadError(GettError):
    """Raised when downloaded contents cannot be written locally."""

    pass


def raise_for_status(method: str, url: str, status_code: int, reason: Optional[str] = None) -> None:
    """
    Raise appropriate exception based on HTTP status code.

    Args:
        method: HTTP method of the failed request
        url: Full request URL
        status_code: HTTP status code
        reason: Reason phrase from the response

    Raises:
        Appropriate RemoteError subclass
    """
    if status_code in (401, 403):
        raise AuthenticationError(method, url, status_code, reason)
    elif status_code == 404:
        raise NotFoundError(method, url, status_code, reason)
    elif status_code >= 300:
        raise RemoteError(method, url, status_code, reason)
