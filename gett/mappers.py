"""
Mapping from decoded API responses to Gett entities.
"""

from typing import Any, Optional, Type, TypeVar

from pydantic import ValidationError as PydanticValidationError

from gett.exceptions import ProtocolError
from gett.models import File, Share, User
from gett.wire import FileRecord, ShareRecord, UserRecord, WireRecord

R = TypeVar("R", bound=WireRecord)


def parse_record(record_type: Type[R], payload: Any) -> R:
    """
    Parse a decoded JSON payload into a wire record.

    Raises:
        ProtocolError: If the payload is not an object or lacks a required field
    """
    if not isinstance(payload, dict):
        raise ProtocolError(
            f"Expected a JSON object for {record_type.__name__}, got {type(payload).__name__}"
        )
    try:
        return record_type.model_validate(payload)
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        raise ProtocolError(f"Malformed {record_type.__name__} payload: {field}: {error['msg']}") from e


def build_user(payload: Any) -> Optional[User]:
    """Build a User from a user payload; returns None unless it is an object."""
    if not isinstance(payload, dict):
        return None

    record = parse_record(UserRecord, payload)
    storage = record.storage
    return User(
        userid=record.userid,
        fullname=record.fullname,
        email=record.email,
        storage_used=storage.used if storage else None,
        storage_limit=storage.limit if storage else None,
    )


def build_file(payload: Any, sharename: Optional[str] = None) -> File:
    """
    Build a File from a file payload.

    ``sharename`` is the owning share when the caller knows it; otherwise
    the payload's own sharename is used. Upload URLs are only present in
    file create responses.
    """
    record = parse_record(FileRecord, payload)
    upload = record.upload
    return File(
        filename=record.filename,
        fileid=record.fileid,
        size=record.size,
        created=record.created,
        downloads=record.downloads,
        readystate=record.readystate,
        url=record.getturl,
        download=record.downloadurl,
        sharename=sharename or record.sharename,
        put_upload_url=upload.puturl if upload else None,
        post_upload_url=upload.posturl if upload else None,
    )


def build_share(payload: Any) -> Share:
    """Build a Share and all of its files, skipping null file entries."""
    record = parse_record(ShareRecord, payload)
    files = [
        build_file(file_payload, sharename=record.sharename)
        for file_payload in record.files or []
        if file_payload
    ]
    return Share(
        sharename=record.sharename,
        title=record.title,
        created=record.created,
        files=files,
    )
